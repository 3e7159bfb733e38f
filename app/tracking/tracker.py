"""
Order tracking collaborator.

The webhook handler reports three things to the merchant's order records:
an order was paid, an order failed, or a refund event arrived. The SQL
implementation appends one OrderEvent row per notification; it never
updates or deduplicates earlier rows.
"""

import logging
from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CallbackType, OrderAction
from app.models.order_event import OrderEvent

logger = logging.getLogger("phonepe_relay.tracking")


class OrderTracker(ABC):
    """Receives order outcome notifications from the webhook handler."""

    @abstractmethod
    async def mark_paid(self, merchant_order_id: str) -> None:
        ...

    @abstractmethod
    async def mark_failed(self, merchant_order_id: str) -> None:
        ...

    @abstractmethod
    async def record_refund(self, merchant_refund_id: str, event_type: str) -> None:
        ...


class SqlOrderTracker(OrderTracker):
    """Order tracker backed by the order_events table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _append(self, reference_id: str, action: OrderAction, event_type: str) -> OrderEvent:
        entry = OrderEvent(
            reference_id=reference_id,
            action=action.value,
            event_type=event_type,
        )
        self._session.add(entry)
        await self._session.commit()
        logger.info("ORDER | ref=%s action=%s event=%s", reference_id, action.value, event_type)
        return entry

    async def mark_paid(self, merchant_order_id: str) -> None:
        await self._append(merchant_order_id, OrderAction.PAID, CallbackType.CHECKOUT_ORDER_COMPLETED.value)

    async def mark_failed(self, merchant_order_id: str) -> None:
        await self._append(merchant_order_id, OrderAction.FAILED, CallbackType.CHECKOUT_ORDER_COMPLETED.value)

    async def record_refund(self, merchant_refund_id: str, event_type: str) -> None:
        await self._append(merchant_refund_id, OrderAction.REFUND, event_type)
