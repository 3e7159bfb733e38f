from app.tracking.tracker import OrderTracker, SqlOrderTracker

__all__ = ["OrderTracker", "SqlOrderTracker"]
