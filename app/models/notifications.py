from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


# ---------- ENUMS (SAFE FOR SQLMODEL) ----------

class RecipientRole(str, Enum):
    admin = "admin"
    client = "client"


# ---------- MODEL ----------

class Notification(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    recipient_role: RecipientRole
    user_id: Optional[int] = None

    trigger_source: str  # order / shipment / inventory
    related_id: Optional[int] = None     # order_id or product_id

    title: str
    content: str
    is_read: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
