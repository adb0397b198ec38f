import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import update
from sqlmodel import Session, func, select
from app.config import settings
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.product import Product
from app.models.user import User
from app.notifications import OrderEvent, dispatch_order_event
from app.schemas.orders_schemas import StockUpdate
from app.services.inventory_service import stock_status

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/summary")
def inventory_summary(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    threshold = settings.low_stock_threshold

    total = session.exec(select(func.count(Product.id))).one()

    low_stock = session.exec(
        select(func.count(Product.id)).where(Product.stock <= threshold, Product.stock > 0)
    ).one()

    out_of_stock = session.exec(
        select(func.count(Product.id)).where(Product.stock == 0)
    ).one()

    return {
        "total_products": total,
        "low_stock": low_stock,
        "out_of_stock": out_of_stock,
        "low_stock_threshold": threshold,
    }


@router.get("")
def list_inventory(
    status: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    threshold = settings.low_stock_threshold
    query = select(Product)

    if status == "low_stock":
        query = query.where(Product.stock <= threshold, Product.stock > 0)
    elif status == "out_of_stock":
        query = query.where(Product.stock == 0)
    elif status == "in_stock":
        query = query.where(Product.stock > threshold)
    elif status is not None:
        raise HTTPException(400, "status must be one of in_stock, low_stock, out_of_stock")

    products = session.exec(query.order_by(Product.stock, Product.id)).all()

    return [
        {
            "id": p.id,
            "name": p.name,
            "stock": p.stock,
            "is_active": p.is_active,
            "status": stock_status(p.stock, threshold),
        }
        for p in products
    ]


@router.patch("/{product_id}")
def update_product_inventory(
    product_id: int,
    data: StockUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    old_stock = product.stock

    # absolute set: a checkout decrement committed after the admin read the
    # stock is overwritten
    session.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock=data.stock, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    session.commit()
    session.refresh(product)

    logger.info(f"Admin {admin.id} set stock of product {product.id}: {old_stock} -> {product.stock}")

    if product.stock <= settings.low_stock_threshold:
        dispatch_order_event(
            event=OrderEvent.LOW_STOCK,
            session=session,
            user=admin,
            extra={
                "product_id": product.id,
                "stock": product.stock,
                "related_id": product.id,
                "admin_title": "Low stock alert",
                "admin_content": f"'{product.name}' stock is low ({product.stock})",
            },
        )

    return {
        "message": "Inventory updated",
        "product_id": product.id,
        "old_stock": old_stock,
        "new_stock": product.stock,
        "status": stock_status(product.stock, settings.low_stock_threshold),
    }
