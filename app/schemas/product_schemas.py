from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    stock: int = Field(default=0, ge=0)

    category_id: Optional[int] = None

    is_active: bool = True
    is_featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)

    category_id: Optional[int] = None

    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
