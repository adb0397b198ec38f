from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from slugify import slugify
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.category import Category
from app.models.product import Product
from app.models.user import User
from app.schemas.category_schemas import CategoryCreate, CategoryUpdate

router = APIRouter()


@router.get("")
def list_categories(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    return session.exec(select(Category).order_by(Category.name)).all()


@router.post("", status_code=201)
def create_category(
    data: CategoryCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    existing = session.exec(select(Category).where(Category.name == data.name)).first()
    if existing:
        raise HTTPException(400, "Category already exists")

    category = Category(**data.model_dump())
    category.slug = category.slug or slugify(category.name)
    session.add(category)
    session.commit()
    session.refresh(category)

    return category


@router.put("/{category_id}")
def update_category(
    category_id: int,
    data: CategoryUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    updates = data.model_dump(exclude_unset=True)
    if updates.get("name") and updates["name"] != category.name:
        clash = session.exec(select(Category).where(Category.name == updates["name"])).first()
        if clash:
            raise HTTPException(400, "Category already exists")

    for field, value in updates.items():
        setattr(category, field, value)
    category.updated_at = datetime.utcnow()

    session.add(category)
    session.commit()
    session.refresh(category)

    return category


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(404, "Category not found")

    # products stay, just uncategorised
    for product in session.exec(select(Product).where(Product.category_id == category_id)).all():
        product.category_id = None
        session.add(product)

    session.delete(category)
    session.commit()

    return {"message": "Category deleted"}
