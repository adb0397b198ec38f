# app/services/fulfillment_service.py
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.constants.order_status import PaymentStatus, ShipmentStatus
from app.errors import FulfillmentFailed
from app.models.order import Order
from app.models.payment import Payment
from app.models.shipment import Shipment
from app.services.numbering import generate_tracking_number, generate_transaction_id
from app.services.order_event_service import log_order_event

logger = logging.getLogger(__name__)


def create_payment(session: Session, order: Order, method: str = "card") -> Payment:
    """
    Record the (already settled) payment for an order.

    No gateway is involved; the record is created `completed`. One payment
    per order: an existing record is returned untouched.
    """
    existing = session.exec(
        select(Payment).where(Payment.order_id == order.id)
    ).first()
    if existing:
        return existing

    payment = Payment(
        order_id=order.id,
        user_id=order.user_id,
        transaction_id=generate_transaction_id(),
        amount=order.total_amount,
        status=PaymentStatus.completed,
        method=method,
    )

    try:
        session.add(payment)
        log_order_event(
            session=session,
            order_id=order.id,
            event_type="payment_recorded",
            label=f"Payment {payment.transaction_id} recorded",
            meta={"amount": str(order.total_amount), "method": method},
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Payment record for order {order.id} failed: {e}")
        raise FulfillmentFailed("payment", order.id, str(e)) from e

    session.refresh(payment)
    return payment


def create_shipment(session: Session, order: Order, carrier: str) -> Shipment:
    """One shipment per order, created `processing` with a fresh tracking number."""
    existing = session.exec(
        select(Shipment).where(Shipment.order_id == order.id)
    ).first()
    if existing:
        return existing

    shipment = Shipment(
        order_id=order.id,
        user_id=order.user_id,
        status=ShipmentStatus.processing,
        tracking_number=generate_tracking_number(),
        carrier=carrier,
    )

    try:
        session.add(shipment)
        log_order_event(
            session=session,
            order_id=order.id,
            event_type="shipment_created",
            label=f"Shipment {shipment.tracking_number} created with {carrier}",
        )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Shipment record for order {order.id} failed: {e}")
        raise FulfillmentFailed("shipment", order.id, str(e)) from e

    session.refresh(shipment)
    return shipment
