from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.constants.order_status import PaymentStatus


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    order_id: int = Field(foreign_key="order.id", index=True, unique=True)
    user_id: int = Field(index=True)

    transaction_id: Optional[str] = Field(default=None, index=True)

    amount: Decimal = Field(max_digits=12, decimal_places=2)
    status: PaymentStatus = Field(default=PaymentStatus.completed)
    method: str = Field(default="card")  # card | paypal | cash
    created_at: datetime = Field(default_factory=datetime.utcnow)
