"""
Shipment lifecycle and its policy link to the order status.

Orders and shipments run separate state machines. When one of them moves
forward, the other is walked forward along its own path (never backwards,
never out of a terminal state) so both tell the same story.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from app.constants.order_status import (
    OrderStatus,
    ShipmentStatus,
    SHIPMENT_TO_ORDER_STATUS,
    TERMINAL_ORDER_STATUSES,
    ensure_shipment_transition,
)
from app.models.order import Order
from app.models.shipment import Shipment
from app.services.order_event_service import log_order_event
from app.services.order_service import update_order_status

logger = logging.getLogger(__name__)

ORDER_FLOW = [
    OrderStatus.pending,
    OrderStatus.confirmed,
    OrderStatus.processing,
    OrderStatus.shipped,
    OrderStatus.delivered,
]

SHIPMENT_FLOW = [
    ShipmentStatus.pending,
    ShipmentStatus.processing,
    ShipmentStatus.shipped,
    ShipmentStatus.in_transit,
    ShipmentStatus.delivered,
]

ORDER_TO_SHIPMENT_STATUS = {
    OrderStatus.shipped: ShipmentStatus.shipped,
    OrderStatus.delivered: ShipmentStatus.delivered,
}


def get_shipment_for_order(session: Session, order_id: int) -> Optional[Shipment]:
    return session.exec(
        select(Shipment).where(Shipment.order_id == order_id)
    ).first()


def advance_order_to(session: Session, order: Order, target: OrderStatus, changed_by: str = "system") -> Order:
    current = OrderStatus(order.status)
    if current in TERMINAL_ORDER_STATUSES or current not in ORDER_FLOW:
        return order

    start, end = ORDER_FLOW.index(current), ORDER_FLOW.index(target)
    for step in ORDER_FLOW[start + 1:end + 1]:
        order = update_order_status(session, order, step, changed_by=changed_by)
    return order


def advance_shipment_to(session: Session, shipment: Shipment, target: ShipmentStatus) -> Shipment:
    current = ShipmentStatus(shipment.status)
    if current not in SHIPMENT_FLOW:
        return shipment

    start, end = SHIPMENT_FLOW.index(current), SHIPMENT_FLOW.index(target)
    if end <= start:
        return shipment

    shipment.status = target
    shipment.updated_at = datetime.utcnow()
    session.add(shipment)
    session.commit()
    session.refresh(shipment)
    return shipment


def update_shipment_status(
    session: Session,
    shipment: Shipment,
    new_status: ShipmentStatus,
    changed_by: str = "system",
) -> Shipment:
    previous = ShipmentStatus(shipment.status)
    shipment.status = ensure_shipment_transition(previous, new_status)
    shipment.updated_at = datetime.utcnow()
    session.add(shipment)

    log_order_event(
        session=session,
        order_id=shipment.order_id,
        event_type=f"shipment_{shipment.status.value}",
        label=f"Shipment moved from {previous.value} to {shipment.status.value}",
        created_by=changed_by,
    )
    session.commit()
    session.refresh(shipment)

    order_target = SHIPMENT_TO_ORDER_STATUS.get(shipment.status)
    if order_target:
        order = session.get(Order, shipment.order_id)
        if order:
            advance_order_to(session, order, order_target, changed_by=changed_by)

    return shipment


def sync_shipment_with_order(session: Session, order: Order) -> Optional[Shipment]:
    """After an admin moves an order to shipped/delivered, follow with its shipment."""
    target = ORDER_TO_SHIPMENT_STATUS.get(OrderStatus(order.status))
    if not target:
        return None

    shipment = get_shipment_for_order(session, order.id)
    if shipment is None:
        logger.warning(f"Order {order.id} is {OrderStatus(order.status).value} but has no shipment record")
        return None

    if ShipmentStatus(shipment.status) == ShipmentStatus.returned:
        return shipment

    return advance_shipment_to(session, shipment, target)

