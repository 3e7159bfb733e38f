"""
Webhook dispatch.

Routes an authenticated callback to the order tracker:
  - CHECKOUT_ORDER_COMPLETED with state COMPLETED -> mark_paid
  - CHECKOUT_ORDER_COMPLETED with state FAILED    -> mark_failed
  - any PG_REFUND* type                           -> record_refund
Everything else is logged and ignored; the caller acknowledges it anyway.
A callback without the order / refund id it needs is logged and ignored too.
"""

import logging
from typing import Optional

from app.models.enums import REFUND_CALLBACK_PREFIX, CallbackType, OrderAction, OrderState
from app.providers.base import CallbackResponse
from app.tracking.tracker import OrderTracker

logger = logging.getLogger("phonepe_relay.webhook")


async def dispatch_callback(callback: CallbackResponse, tracker: OrderTracker) -> Optional[OrderAction]:
    """
    Notify the tracker about a validated callback.

    Returns:
        The notification that was sent, or None when the callback was ignored.
    """
    payload = callback.payload or {}
    event_type = callback.type or ""

    if event_type == CallbackType.CHECKOUT_ORDER_COMPLETED.value:
        order_id = payload.get("originalMerchantOrderId")
        state = payload.get("state")

        if state not in (OrderState.COMPLETED.value, OrderState.FAILED.value):
            logger.info("Ignoring order %s in state %s", order_id, state)
            return None

        if not order_id:
            logger.warning("%s callback in state %s has no originalMerchantOrderId", event_type, state)
            return None

        if state == OrderState.COMPLETED.value:
            logger.info("SUCCESS: Order %s COMPLETED", order_id)
            await tracker.mark_paid(order_id)
            return OrderAction.PAID

        logger.info("FAILED: Order %s FAILED", order_id)
        await tracker.mark_failed(order_id)
        return OrderAction.FAILED

    if event_type.startswith(REFUND_CALLBACK_PREFIX):
        refund_id = payload.get("merchantRefundId")
        if not refund_id:
            logger.warning("%s callback has no merchantRefundId", event_type)
            return None

        logger.info("REFUND event %s for %s", event_type, refund_id)
        await tracker.record_refund(refund_id, event_type)
        return OrderAction.REFUND

    logger.info("Ignoring callback type %s", event_type)
    return None
