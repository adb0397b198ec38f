from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime

from app.constants.order_status import ReservationStatus


class StockReservation(SQLModel, table=True):
    """One row per product per checkout attempt.

    The status column is the idempotency guard for compensation: stock is
    only credited back by the call that flips ``reserved`` to ``released``.
    """

    __tablename__ = "stock_reservation"
    __table_args__ = (
        UniqueConstraint("checkout_id", "product_id", name="uq_reservation_checkout_product"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    checkout_id: str = Field(index=True)
    product_id: int = Field(foreign_key="product.id", index=True)
    quantity: int

    status: ReservationStatus = Field(default=ReservationStatus.reserved)
    order_id: Optional[int] = Field(default=None, foreign_key="order.id")

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
