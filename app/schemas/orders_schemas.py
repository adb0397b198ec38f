from pydantic import BaseModel, Field
from typing import Optional

from app.constants.order_status import OrderStatus, ShipmentStatus


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class ShipmentStatusUpdate(BaseModel):
    status: ShipmentStatus


class ShipmentUpdate(BaseModel):
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None


class StockUpdate(BaseModel):
    stock: int = Field(..., ge=0)
