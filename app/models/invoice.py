from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.constants.order_status import InvoiceStatus


class Invoice(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    order_id: int = Field(foreign_key="order.id", index=True, unique=True)
    user_id: int = Field(index=True)
    invoice_number: str = Field(index=True, unique=True)

    subtotal: Decimal = Field(max_digits=12, decimal_places=2)
    tax_amount: Decimal = Field(max_digits=12, decimal_places=2)
    shipping_cost: Decimal = Field(max_digits=12, decimal_places=2)
    total_amount: Decimal = Field(max_digits=12, decimal_places=2)

    status: InvoiceStatus = Field(default=InvoiceStatus.paid)
    created_at: datetime = Field(default_factory=datetime.utcnow)
