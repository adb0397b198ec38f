from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select
from app.database import get_session
from app.models.product import Product
from app.utils.pagination import paginate
from app.utils.serializers import product_out

router = APIRouter()


@router.get("")
def list_products(
    page: int = 1,
    limit: int = 12,
    search: Optional[str] = None,
    category_id: Optional[int] = None,
    featured: Optional[bool] = None,
    sort: str = Query("newest", pattern="^(newest|price_asc|price_desc|name)$"),
    session: Session = Depends(get_session),
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712

    if search:
        like = f"%{search}%"
        query = query.where(Product.name.ilike(like) | Product.description.ilike(like))

    if category_id is not None:
        query = query.where(Product.category_id == category_id)

    if featured is not None:
        query = query.where(Product.is_featured == featured)

    order_by = {
        "newest": Product.created_at.desc(),
        "price_asc": Product.price.asc(),
        "price_desc": Product.price.desc(),
        "name": Product.name.asc(),
    }[sort]
    query = query.order_by(order_by, Product.id)

    return paginate(session=session, query=query, page=page, limit=limit, serializer=product_out)


@router.get("/{product_id}")
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise HTTPException(404, "Product not found")

    data = product_out(product)
    data["category"] = (
        {"id": product.category.id, "name": product.category.name}
        if product.category else None
    )
    return data
