import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete
from slugify import slugify
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.cart import CartItem
from app.models.category import Category
from app.models.order_item import OrderItem
from app.models.product import Product
from app.models.stock_reservation import StockReservation
from app.models.user import User
from app.schemas.product_schemas import ProductCreate, ProductUpdate
from app.utils.pagination import paginate
from app.utils.serializers import product_out

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_category(session: Session, category_id: Optional[int]):
    if category_id is not None and not session.get(Category, category_id):
        raise HTTPException(400, "Category does not exist")


@router.get("")
def list_products(
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    query = select(Product)

    if search:
        query = query.where(Product.name.ilike(f"%{search}%"))

    if is_active is not None:
        query = query.where(Product.is_active == is_active)

    query = query.order_by(Product.created_at.desc(), Product.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit, serializer=product_out)


@router.post("", status_code=201)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    _check_category(session, data.category_id)

    product = Product(**data.model_dump())
    product.slug = product.slug or slugify(product.name)
    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product {product.id} created: {product.name}")
    return product_out(product)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    updates = data.model_dump(exclude_unset=True)
    if "category_id" in updates:
        _check_category(session, updates["category_id"])

    for field, value in updates.items():
        setattr(product, field, value)
    product.updated_at = datetime.utcnow()

    session.add(product)
    session.commit()
    session.refresh(product)

    return product_out(product)


@router.patch("/{product_id}/toggle-active")
def toggle_product_active(
    product_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    product.is_active = not product.is_active
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)

    return {"id": product.id, "is_active": product.is_active}


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    referenced = session.exec(
        select(OrderItem.id).where(OrderItem.product_id == product_id)
    ).first() or session.exec(
        select(StockReservation.id).where(StockReservation.product_id == product_id)
    ).first()

    session.execute(delete(CartItem).where(CartItem.product_id == product_id))

    if referenced:
        # order history points at it; archive instead
        product.is_active = False
        product.updated_at = datetime.utcnow()
        session.add(product)
        session.commit()
        return {"message": "Product archived", "archived": True}

    session.delete(product)
    session.commit()
    return {"message": "Product deleted", "archived": False}
