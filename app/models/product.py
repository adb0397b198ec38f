from sqlmodel import SQLModel, Field ,Relationship
from sqlalchemy import CheckConstraint
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal


if TYPE_CHECKING:
    from .category import Category

class Product(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )

    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: Optional[str] = Field(default=None, index=True)
    description: Optional[str] = None
    image_url: Optional[str] = None

    #Shop Details
    price: Decimal = Field(max_digits=12, decimal_places=2)
    stock: int = Field(default=0)  # checkout changes it only through inventory_service
    is_active: bool = Field(default=True)
    is_featured: bool = False

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    #category
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    category: Optional["Category"] = Relationship(back_populates="products")

    @property
    def in_stock(self) -> bool:
        return self.stock is not None and self.stock > 0
