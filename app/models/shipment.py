from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.constants.order_status import ShipmentStatus


class Shipment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    order_id: int = Field(foreign_key="order.id", index=True, unique=True)
    user_id: int = Field(index=True)

    status: ShipmentStatus = Field(default=ShipmentStatus.processing)
    tracking_number: Optional[str] = Field(default=None, index=True)
    carrier: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
