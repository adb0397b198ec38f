# app/services/inventory_service.py
import logging
from collections import OrderedDict
from datetime import datetime
from typing import List, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.constants.order_status import ReservationStatus
from app.errors import InsufficientStock, ProductUnavailable
from app.models.product import Product
from app.models.stock_reservation import StockReservation
from app.schemas.checkout_schemas import CartLine

logger = logging.getLogger(__name__)


def _current_stock(session: Session, product_id: int):
    return session.exec(
        select(Product.stock).where(Product.id == product_id)
    ).first()


def decrement_stock_if_available(session: Session, product_id: int, quantity: int) -> int:
    """
    Atomically take `quantity` units off a product's stock.

    Single conditional UPDATE, never read-then-write, so concurrent checkouts
    for the same product cannot oversell. Does not commit.
    """
    result = session.execute(
        update(Product)
        .where(
            Product.id == product_id,
            Product.is_active == True,  # noqa: E712
            Product.stock >= quantity,
        )
        .values(stock=Product.stock - quantity, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 1:
        return _current_stock(session, product_id)

    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise ProductUnavailable(product_id)

    raise InsufficientStock(product_id, quantity, _current_stock(session, product_id))


def increment_stock(session: Session, product_id: int, quantity: int) -> None:
    """Compensation primitive. Does not commit."""
    session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock=Product.stock + quantity, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )


def reserve_stock(session: Session, checkout_id: str, product_id: int, quantity: int) -> StockReservation:
    """Decrement stock and record the reservation in one transaction."""
    try:
        new_stock = decrement_stock_if_available(session, product_id, quantity)

        reservation = StockReservation(
            checkout_id=checkout_id,
            product_id=product_id,
            quantity=quantity,
            status=ReservationStatus.reserved,
        )
        session.add(reservation)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(reservation)
    logger.info(
        f"Reserved {quantity} of product {product_id} for checkout {checkout_id} "
        f"(stock now {new_stock})"
    )
    return reservation


def release_reservation(session: Session, reservation_id: int) -> bool:
    """
    Give a reservation's units back to the product.

    Only the call that moves the row from `reserved` to `released` credits
    stock, so calling this twice (or after commit) is a no-op returning False.
    """
    try:
        flipped = session.execute(
            update(StockReservation)
            .where(
                StockReservation.id == reservation_id,
                StockReservation.status == ReservationStatus.reserved,
            )
            .values(status=ReservationStatus.released, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )

        if flipped.rowcount != 1:
            session.rollback()
            logger.info(f"Reservation {reservation_id} already settled, nothing to release")
            return False

        reservation = session.exec(
            select(StockReservation).where(StockReservation.id == reservation_id)
        ).one()
        increment_stock(session, reservation.product_id, reservation.quantity)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(
        f"Released reservation {reservation_id}: "
        f"+{reservation.quantity} to product {reservation.product_id}"
    )
    return True


def release_reservations(session: Session, checkout_id: str) -> int:
    """Release every outstanding reservation of a checkout attempt."""
    try:
        reservation_ids = session.exec(
            select(StockReservation.id)
            .where(
                StockReservation.checkout_id == checkout_id,
                StockReservation.status == ReservationStatus.reserved,
            )
            .order_by(StockReservation.product_id)
        ).all()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Could not load reservations of checkout {checkout_id}: {e}")
        return 0

    released = 0
    for reservation_id in reservation_ids:
        try:
            if release_reservation(session, reservation_id):
                released += 1
        except SQLAlchemyError as e:
            # keep going, the remaining rows stay `reserved` for reconciliation
            logger.error(f"Could not release reservation {reservation_id}: {e}")

    return released


def commit_reservations(session: Session, checkout_id: str, order_id: int) -> int:
    """Bind a checkout's reservations to its order; they can no longer be released."""
    try:
        result = session.execute(
            update(StockReservation)
            .where(
                StockReservation.checkout_id == checkout_id,
                StockReservation.status == ReservationStatus.reserved,
            )
            .values(
                status=ReservationStatus.committed,
                order_id=order_id,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        session.commit()
    except Exception:
        session.rollback()
        raise

    return result.rowcount


def aggregate_quantities(lines: Sequence[CartLine]) -> "OrderedDict[int, int]":
    """product_id -> total quantity, ascending product_id."""
    totals = {}
    for line in lines:
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return OrderedDict(sorted(totals.items()))


def reserve_lines(session: Session, checkout_id: str, lines: Sequence[CartLine]) -> List[StockReservation]:
    """
    Reserve every line in ascending product_id order.

    Stops at the first failing line, releases what this call already
    reserved, then re-raises the original error.
    """
    reservations: List[StockReservation] = []

    for product_id, quantity in aggregate_quantities(lines).items():
        try:
            reservations.append(reserve_stock(session, checkout_id, product_id, quantity))
        except Exception as e:
            logger.warning(
                f"Reservation failed for product {product_id} in checkout {checkout_id}: {e}; "
                f"compensating {len(reservations)} earlier reservation(s)"
            )
            for reservation in reversed(reservations):
                try:
                    release_reservation(session, reservation.id)
                except SQLAlchemyError as release_error:
                    logger.error(
                        f"Compensation failed for reservation {reservation.id}: {release_error}"
                    )
            raise

    return reservations


def stock_status(stock: int, low_stock_threshold: int) -> str:
    if stock == 0:
        return "OUT_OF_STOCK"
    if stock <= low_stock_threshold:
        return "LOW_STOCK"
    return "IN_STOCK"
