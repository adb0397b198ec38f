# app/services/checkout_service.py
"""
Order placement.

Stages up to and including the order write are critical: a failure there
aborts the checkout and compensates every stock reservation made by the
attempt. Everything after the order exists (payment, shipment, invoice,
cart cleanup) is best effort and reported back as warnings.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.config import settings as default_settings
from app.constants.order_status import OrderStatus
from app.errors import (
    FulfillmentFailed,
    InsufficientStock,
    InvoiceGenerationFailed,
    MissingShippingAddress,
    OrderCreationFailed,
    ProductUnavailable,
)
from app.models.order import Order
from app.notifications import OrderEvent, dispatch_order_event
from app.schemas.checkout_schemas import CartLine, PricingBreakdown, ShippingDetails
from app.services import cart_service, fulfillment_service, inventory_service, invoice_service, order_service
from app.services.pricing import pricing_from_settings

logger = logging.getLogger(__name__)


@dataclass
class CheckoutWarning:
    stage: str      # payment | shipment | invoice | cart | confirmation
    message: str


@dataclass
class CheckoutResult:
    order_id: int
    order_number: str
    status: OrderStatus
    pricing: PricingBreakdown
    warnings: List[CheckoutWarning] = field(default_factory=list)

    @property
    def needs_followup(self) -> bool:
        return bool(self.warnings)


def validate_shipping(shipping: Optional[ShippingDetails]) -> ShippingDetails:
    if shipping is None:
        raise MissingShippingAddress(["address", "city"])

    missing = [
        name for name in ("address", "city")
        if not (getattr(shipping, name) or "").strip()
    ]
    if missing:
        raise MissingShippingAddress(missing)
    return shipping


def place_order(
    session: Session,
    *,
    user_id: int,
    lines: Sequence[CartLine],
    shipping: Optional[ShippingDetails],
    payment_method: str = "card",
    settings=default_settings,
) -> CheckoutResult:
    # 1. validate + price, nothing is mutated before this passes
    shipping = validate_shipping(shipping)
    pricing = pricing_from_settings(lines, settings)

    checkout_id = str(uuid4())
    logger.info(f"Checkout {checkout_id} started for user {user_id} ({len(lines)} line(s))")

    # 2. reserve stock; reserve_lines compensates its own partial work
    try:
        inventory_service.reserve_lines(session, checkout_id, lines)
    except (InsufficientStock, ProductUnavailable):
        raise
    except SQLAlchemyError as e:
        logger.error(f"Checkout {checkout_id}: stock reservation failed: {e}")
        inventory_service.release_reservations(session, checkout_id)
        raise OrderCreationFailed("stock reservation failed") from e

    # 3. write the order, then bind the reservations to it
    initial_status = OrderStatus.pending if settings.strict_order_confirmation else OrderStatus.confirmed
    try:
        order = order_service.create_order(
            session,
            user_id=user_id,
            lines=lines,
            pricing=pricing,
            shipping=shipping,
            status=initial_status,
        )
    except (OrderCreationFailed, SQLAlchemyError) as e:
        logger.error(f"Checkout {checkout_id}: order write failed, releasing stock: {e}")
        inventory_service.release_reservations(session, checkout_id)
        if isinstance(e, OrderCreationFailed):
            raise
        raise OrderCreationFailed(str(e)) from e

    order_id, order_number = order.id, order.order_number

    try:
        inventory_service.commit_reservations(session, checkout_id, order_id)
    except SQLAlchemyError as e:
        logger.error(f"Checkout {checkout_id}: could not commit reservations, discarding order {order_id}: {e}")
        _discard_order(session, order_id)
        inventory_service.release_reservations(session, checkout_id)
        raise OrderCreationFailed("could not commit stock reservations") from e

    # 4. soft stages, the sale already happened
    warnings: List[CheckoutWarning] = []
    fulfilled = True

    try:
        fulfillment_service.create_payment(session, order, method=payment_method)
    except (FulfillmentFailed, SQLAlchemyError) as e:
        session.rollback()
        fulfilled = False
        warnings.append(CheckoutWarning("payment", str(e)))

    try:
        fulfillment_service.create_shipment(session, order, carrier=settings.shipping_carrier)
    except (FulfillmentFailed, SQLAlchemyError) as e:
        session.rollback()
        fulfilled = False
        warnings.append(CheckoutWarning("shipment", str(e)))

    if initial_status == OrderStatus.pending and fulfilled:
        try:
            order = order_service.update_order_status(session, order, OrderStatus.confirmed)
        except SQLAlchemyError as e:
            session.rollback()
            warnings.append(CheckoutWarning("confirmation", str(e)))

    try:
        invoice_service.create_invoice(session, order)
    except (InvoiceGenerationFailed, SQLAlchemyError) as e:
        session.rollback()
        warnings.append(CheckoutWarning("invoice", str(e)))

    # 5. cart goes only once the order is durable
    try:
        cart_service.clear_cart(session, user_id)
    except SQLAlchemyError as e:
        logger.error(f"Checkout {checkout_id}: clearing cart for user {user_id} failed: {e}")
        warnings.append(CheckoutWarning("cart", str(e)))

    for warning in warnings:
        logger.warning(f"Order {order_number} needs follow-up ({warning.stage}): {warning.message}")

    _publish_order_placed(session, order, order_number)

    status = _current_status(session, order, initial_status)
    logger.info(f"Checkout {checkout_id} placed order {order_number} ({status.value})")

    return CheckoutResult(
        order_id=order_id,
        order_number=order_number,
        status=status,
        pricing=pricing,
        warnings=warnings,
    )


def checkout_cart(
    session: Session,
    *,
    user_id: int,
    shipping: Optional[ShippingDetails],
    payment_method: str = "card",
    settings=default_settings,
) -> CheckoutResult:
    """Read the user's cart and place an order for it."""
    lines = cart_service.get_cart_lines(session, user_id)
    return place_order(
        session,
        user_id=user_id,
        lines=lines,
        shipping=shipping,
        payment_method=payment_method,
        settings=settings,
    )


def _discard_order(session: Session, order_id: int) -> None:
    try:
        order_service.delete_order(session, order_id)
    except SQLAlchemyError as e:
        logger.error(f"Could not delete order {order_id} on rollback: {e}")


def _current_status(session: Session, order: Order, fallback: OrderStatus) -> OrderStatus:
    try:
        return OrderStatus(order.status)
    except SQLAlchemyError:
        session.rollback()
        return fallback


def _publish_order_placed(session: Session, order: Order, order_number: str) -> None:
    try:
        dispatch_order_event(
            event=OrderEvent.ORDER_PLACED,
            session=session,
            order=order,
            extra={
                "total": str(order.total_amount),
                "admin_title": "New Order Placed",
                "admin_content": f"Order {order.order_number} placed for {order.total_amount}",
            },
        )
    except Exception as e:
        session.rollback()
        logger.error(f"Publishing OrderPlaced for order {order_number} failed: {e}")
