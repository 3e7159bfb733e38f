"""
Checkout request construction.

Turns the storefront's order description into a gateway pay request:
  1. Amount in rupees -> paisa (rounded to whole rupees first)
  2. Fresh merchant order id ("MUID-" + 8 hex chars)
  3. Product and customer names attached as metaInfo tags
"""

import math
import uuid
from dataclasses import dataclass
from typing import Any

from app.providers.base import MetaInfo, StandardCheckoutPayRequest

MERCHANT_ORDER_PREFIX = "MUID-"
META_FIELD_MAX_LENGTH = 255


@dataclass
class OrderRequest:
    """Order description posted by the storefront."""

    amount: Any
    customer_name: Any
    product_name: str

    @classmethod
    def from_payload(cls, order_data: dict[str, Any]) -> "OrderRequest":
        """
        Read the fields the relay needs from an `orderData` object.

        Raises KeyError / TypeError when the object does not have the
        expected shape; the caller reports those as generic errors.
        """
        return cls(
            amount=order_data["amount"],
            customer_name=order_data["customer_details"]["customer_name"],
            product_name=order_data["product_name"],
        )


def to_minor_units(amount: Any) -> int:
    """
    Convert a rupee amount to paisa.

    The amount is rounded to whole rupees (half up) before scaling, so any
    fractional part is dropped: 499.49 -> 49900, 499.5 -> 50000.
    """
    return int(math.floor(float(amount) + 0.5)) * 100


def new_merchant_order_id() -> str:
    return f"{MERCHANT_ORDER_PREFIX}{uuid.uuid4().hex[:8]}"


def build_pay_request(order: OrderRequest, return_url: str) -> StandardCheckoutPayRequest:
    """Compose the gateway pay request for an order."""
    if not isinstance(order.product_name, str):
        raise TypeError(f"product_name must be a string, got {type(order.product_name).__name__}")

    meta_info = MetaInfo(
        udf1=order.product_name[:META_FIELD_MAX_LENGTH],
        udf2=order.customer_name,
    )
    return StandardCheckoutPayRequest(
        merchant_order_id=new_merchant_order_id(),
        amount=to_minor_units(order.amount),
        redirect_url=return_url,
        meta_info=meta_info,
    )
