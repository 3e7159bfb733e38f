"""SQLAlchemy models for the checkout relay."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderEvent(Base):
    """
    One order notification derived from an authenticated webhook.

    Rows are append-only: a retried webhook produces another row rather than
    updating the previous one. Correlating them with the merchant's own order
    records is left to whoever reads the table.
    """

    __tablename__ = "order_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reference_id = Column(String(100), nullable=False, index=True)  # merchant order id or refund id
    action = Column(String(20), nullable=False)
    event_type = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
