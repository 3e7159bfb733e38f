"""
Mock payment gateway for local development and tests.

Behaves like the PhonePe client without touching the network:
  - Records every pay / validate_callback call for inspection
  - Returns a configurable pay response and callback
  - Raises a configured error instead, when one is set
"""

import uuid
from typing import Optional

from app.providers.base import (
    CallbackResponse,
    PaymentGateway,
    StandardCheckoutPayRequest,
    StandardCheckoutPayResponse,
)


class MockPaymentGateway(PaymentGateway):
    """Deterministic stand-in for the PhonePe client."""

    def __init__(
        self,
        pay_error: Optional[Exception] = None,
        callback: Optional[CallbackResponse] = None,
        callback_error: Optional[Exception] = None,
    ):
        self.pay_error = pay_error
        self.callback = callback or CallbackResponse(type="CHECKOUT_ORDER_COMPLETED", payload={})
        self.callback_error = callback_error

        self.pay_calls: list[StandardCheckoutPayRequest] = []
        self.validate_calls: list[tuple[str, str, str, str]] = []

    async def pay(self, request: StandardCheckoutPayRequest) -> StandardCheckoutPayResponse:
        self.pay_calls.append(request)
        if self.pay_error is not None:
            raise self.pay_error

        order_id = f"OMO{uuid.uuid4().hex[:16].upper()}"
        return StandardCheckoutPayResponse(
            order_id=order_id,
            state="PENDING",
            expire_at=1_700_000_000_000,
            redirect_url=f"https://mercury-uat.phonepe.com/transact/uat_v2?token={order_id}",
        )

    def validate_callback(
        self,
        username: str,
        password: str,
        authorization: str,
        body: str,
    ) -> CallbackResponse:
        self.validate_calls.append((username, password, authorization, body))
        if self.callback_error is not None:
            raise self.callback_error
        return self.callback
