from .events import OrderEvent
from .dispatcher import dispatch_order_event, subscribe, unsubscribe, clear_subscribers

__all__ = [
    "OrderEvent",
    "dispatch_order_event",
    "subscribe",
    "unsubscribe",
    "clear_subscribers",
]
