# app/services/order_service.py
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, ensure_transition
from app.errors import OrderCreationFailed, OrderNumberExhausted
from app.models.order import Order
from app.models.order_event import OrderTimelineEvent
from app.models.order_item import OrderItem
from app.schemas.checkout_schemas import CartLine, PricingBreakdown, ShippingDetails
from app.services.numbering import generate_order_number
from app.services.order_event_service import log_order_event
from app.services.pricing import from_minor_units, line_total_minor

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 3


def create_order(
    session: Session,
    *,
    user_id: int,
    lines: Sequence[CartLine],
    pricing: PricingBreakdown,
    shipping: ShippingDetails,
    status: OrderStatus = OrderStatus.confirmed,
    number_factory: Callable[[], str] = generate_order_number,
    max_attempts: int = MAX_NUMBER_ATTEMPTS,
) -> Order:
    """
    Write the order and its lines as one transaction.

    The order row is flushed first so an order_number collision can be told
    apart from a failure writing the lines: the former regenerates the number
    and retries, the latter rolls everything back.
    """
    line_totals = [line_total_minor(line) for line in lines]
    if from_minor_units(sum(line_totals)) != pricing.subtotal:
        raise OrderCreationFailed("line totals do not match the priced subtotal")

    for attempt in range(1, max_attempts + 1):
        order_number = number_factory()

        order = Order(
            order_number=order_number,
            user_id=user_id,
            status=status,
            subtotal=pricing.subtotal,
            tax_amount=pricing.tax_amount,
            shipping_cost=pricing.shipping_cost,
            total_amount=pricing.grand_total,
            shipping_address=shipping.address,
            shipping_city=shipping.city,
            shipping_postal_code=shipping.postal_code,
            shipping_country=shipping.country,
        )
        session.add(order)

        try:
            session.flush()
        except IntegrityError as e:
            session.rollback()
            if not order_number_taken(session, order_number):
                logger.error(f"Order for user {user_id} violated a constraint: {e.orig}")
                raise OrderCreationFailed(str(e.orig)) from e
            logger.warning(
                f"Order number collision on {order_number} "
                f"(attempt {attempt}/{max_attempts}), regenerating"
            )
            continue
        except SQLAlchemyError as e:
            session.rollback()
            raise OrderCreationFailed(str(e)) from e

        try:
            for line, total in zip(lines, line_totals):
                session.add(
                    OrderItem(
                        order_id=order.id,
                        product_id=line.product_id,
                        product_name=line.product_name,
                        product_image=line.product_image,
                        unit_price=line.unit_price,
                        quantity=line.quantity,
                        line_total=from_minor_units(total),
                    )
                )

            log_order_event(
                session=session,
                order_id=order.id,
                event_type="order_placed",
                label=f"Order {order_number} placed",
                meta={"total": str(pricing.grand_total), "status": OrderStatus(status).value},
            )

            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Writing lines for order {order_number} failed, rolled back: {e}")
            raise OrderCreationFailed(str(e)) from e

        session.refresh(order)
        logger.info(f"Created order {order.id} ({order_number}) for user {user_id}")
        return order

    raise OrderNumberExhausted(max_attempts)


def order_number_taken(session: Session, order_number: str) -> bool:
    return session.exec(
        select(Order.id).where(Order.order_number == order_number)
    ).first() is not None


def delete_order(session: Session, order_id: int) -> None:
    """Rollback path only; orders are otherwise immutable history."""
    try:
        session.execute(delete(OrderTimelineEvent).where(OrderTimelineEvent.order_id == order_id))
        session.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        session.execute(delete(Order).where(Order.id == order_id))
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Deleted order {order_id}")


def update_order_status(
    session: Session,
    order: Order,
    new_status: OrderStatus,
    changed_by: str = "system",
) -> Order:
    """Move an order through the status machine and log it on the timeline."""
    previous = OrderStatus(order.status)
    order.status = ensure_transition(previous, new_status)
    order.updated_at = datetime.utcnow()
    session.add(order)

    log_order_event(
        session=session,
        order_id=order.id,
        event_type=f"status_{order.status.value}",
        label=f"Status changed from {previous.value} to {order.status.value}",
        created_by=changed_by,
        meta={"from": previous.value, "to": order.status.value},
    )

    session.commit()
    session.refresh(order)
    return order


def get_order_for_user(session: Session, order_id: int, user_id: int) -> Optional[Order]:
    return session.exec(
        select(Order).where(Order.id == order_id, Order.user_id == user_id)
    ).first()
