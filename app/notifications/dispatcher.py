import logging
from collections import defaultdict
from typing import Callable, Dict, List

from app.notifications.rules import NOTIFICATION_RULES
from app.notifications.channels import Channel
from app.services.notification_service import create_notification
from app.models.notifications import RecipientRole
from app.notifications.events import OrderEvent

logger = logging.getLogger(__name__)

Handler = Callable[[dict], None]

_subscribers: Dict[OrderEvent, List[Handler]] = defaultdict(list)


def subscribe(event: OrderEvent, handler: Handler) -> None:
    _subscribers[event].append(handler)


def unsubscribe(event: OrderEvent, handler: Handler) -> None:
    if handler in _subscribers[event]:
        _subscribers[event].remove(handler)


def clear_subscribers() -> None:
    _subscribers.clear()


def dispatch_order_event(
    *,
    event: OrderEvent,
    session,
    order=None,
    user=None,
    extra: dict | None = None,
    notify_admin: bool = True,
):
    """
    Central notification dispatcher.

    Handles:
    - admin in-app notifications
    - in-process subscribers (realtime fan-out lives outside this app)
    """

    rules = NOTIFICATION_RULES.get(event, {})
    extra = extra or {}

    payload = {
        "event": event.value,
        "order_id": getattr(order, "id", None),
        "order_number": getattr(order, "order_number", None),
        "user_id": getattr(user, "id", None) or getattr(order, "user_id", None),
        **extra,
    }

    # -------------------------
    # ADMIN IN-APP NOTIFICATION
    # -------------------------
    if notify_admin and rules.get(Channel.INAPP_ADMIN):
        create_notification(
            session=session,
            recipient_role=RecipientRole.admin,
            user_id=None,
            trigger_source=event.value,
            related_id=extra.get("related_id", payload["order_id"]),
            title=extra.get("admin_title", "Order Update"),
            content=extra.get("admin_content", ""),
        )
        session.commit()

    # -------------------------
    # SUBSCRIBERS
    # -------------------------
    if rules.get(Channel.SUBSCRIBERS):
        for handler in list(_subscribers.get(event, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Subscriber {handler!r} failed for {event.value}: {e}")

    return payload
