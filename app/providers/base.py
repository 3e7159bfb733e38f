"""
Abstract payment gateway interface.

The relay only ever needs two things from the gateway: start a checkout
(`pay`) and authenticate + parse a webhook (`validate_callback`). The real
PhonePe client and the test double both implement this interface, so the
handlers never care which one they were given.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Env(str, Enum):
    """Gateway environment."""

    SANDBOX = "SANDBOX"
    PRODUCTION = "PRODUCTION"

    @classmethod
    def from_setting(cls, value: Optional[str]) -> "Env":
        return cls.PRODUCTION if value == cls.PRODUCTION.value else cls.SANDBOX


@dataclass
class MetaInfo:
    """Free-form tags echoed back by the gateway on status and webhooks."""

    udf1: Optional[str] = None
    udf2: Optional[str] = None
    udf3: Optional[str] = None
    udf4: Optional[str] = None
    udf5: Optional[str] = None

    def to_dict(self) -> dict[str, str]:
        return {
            name: value
            for name, value in (
                ("udf1", self.udf1),
                ("udf2", self.udf2),
                ("udf3", self.udf3),
                ("udf4", self.udf4),
                ("udf5", self.udf5),
            )
            if value is not None
        }


@dataclass
class StandardCheckoutPayRequest:
    """Request to create a standard checkout order."""

    merchant_order_id: str
    amount: int  # minor units (paisa)
    redirect_url: str
    meta_info: Optional[MetaInfo] = None
    message: Optional[str] = None
    expire_after: Optional[int] = None  # seconds

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "merchantOrderId": self.merchant_order_id,
            "amount": self.amount,
            "paymentFlow": {
                "type": "PG_CHECKOUT",
                "merchantUrls": {"redirectUrl": self.redirect_url},
            },
        }
        if self.meta_info is not None:
            body["metaInfo"] = self.meta_info.to_dict()
        if self.message is not None:
            body["paymentFlow"]["message"] = self.message
        if self.expire_after is not None:
            body["expireAfter"] = self.expire_after
        return body


@dataclass
class StandardCheckoutPayResponse:
    """Gateway response to a pay request."""

    order_id: str
    state: str
    expire_at: Optional[int]
    redirect_url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StandardCheckoutPayResponse":
        return cls(
            order_id=data["orderId"],
            state=data["state"],
            expire_at=data.get("expireAt"),
            redirect_url=data["redirectUrl"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "orderId": self.order_id,
            "state": self.state,
            "expireAt": self.expire_at,
            "redirectUrl": self.redirect_url,
        }


@dataclass
class CallbackResponse:
    """An authenticated webhook: its event type and event-specific payload."""

    type: str
    payload: dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract base class for payment gateway clients."""

    @abstractmethod
    async def pay(self, request: StandardCheckoutPayRequest) -> StandardCheckoutPayResponse:
        """
        Create a checkout order with the gateway.

        Raises:
            PhonePeError: When the gateway rejects the request.
        """
        ...

    @abstractmethod
    def validate_callback(
        self,
        username: str,
        password: str,
        authorization: str,
        body: str,
    ) -> CallbackResponse:
        """
        Authenticate a webhook and parse its body.

        Raises:
            PhonePeError: When the Authorization header does not match the
                configured webhook credentials.
        """
        ...

    async def close(self) -> None:
        """Release any network resources held by the client."""
        return None
