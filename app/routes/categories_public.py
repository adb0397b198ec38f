from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, func, select
from app.database import get_session
from app.models.category import Category
from app.models.product import Product
from app.utils.serializers import product_out

router = APIRouter()


@router.get("")
def list_categories(session: Session = Depends(get_session)):
    rows = session.exec(
        select(Category, func.count(Product.id))
        .join(
            Product,
            (Product.category_id == Category.id) & (Product.is_active == True),  # noqa: E712
            isouter=True,
        )
        .group_by(Category.id)
        .order_by(Category.name)
    ).all()

    return [
        {
            "id": c.id,
            "name": c.name,
            "slug": c.slug,
            "description": c.description,
            "image_url": c.image_url,
            "product_count": count,
        }
        for c, count in rows
    ]


@router.get("/{category_id}")
def get_category(category_id: int, session: Session = Depends(get_session)):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    products = session.exec(
        select(Product)
        .where(Product.category_id == category_id, Product.is_active == True)  # noqa: E712
        .order_by(Product.name)
    ).all()

    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "image_url": category.image_url,
        "products": [product_out(p) for p in products],
    }
