from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PaymentMethod(SQLModel, table=True):
    __tablename__ = "payment_method"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    type: str = Field(default="card")  # card | paypal
    card_brand: Optional[str] = None
    card_last_four: Optional[str] = None
    card_holder_name: Optional[str] = None

    # at most one per user
    is_default: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)
