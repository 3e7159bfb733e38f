"""Enumerations for the checkout relay domain model."""

from enum import Enum


class CallbackType(str, Enum):
    """Webhook callback types the relay acts on."""

    CHECKOUT_ORDER_COMPLETED = "CHECKOUT_ORDER_COMPLETED"
    CHECKOUT_ORDER_FAILED = "CHECKOUT_ORDER_FAILED"
    PG_REFUND_ACCEPTED = "PG_REFUND_ACCEPTED"
    PG_REFUND_COMPLETED = "PG_REFUND_COMPLETED"
    PG_REFUND_FAILED = "PG_REFUND_FAILED"


REFUND_CALLBACK_PREFIX = "PG_REFUND"


class OrderState(str, Enum):
    """Order states reported in a checkout webhook payload."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class OrderAction(str, Enum):
    """Notifications sent to the order tracker."""

    PAID = "paid"
    FAILED = "failed"
    REFUND = "refund"
