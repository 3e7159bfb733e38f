from app.models.enums import CallbackType, OrderAction, OrderState
from app.models.order_event import Base, OrderEvent

__all__ = [
    "Base",
    "OrderEvent",
    "CallbackType",
    "OrderAction",
    "OrderState",
]
