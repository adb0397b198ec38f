from fastapi import APIRouter, Depends
from sqlmodel import Session, func, select
from app.config import settings
from app.constants.order_status import OrderStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.order import Order
from app.models.product import Product
from app.models.user import User
from app.services.pricing import format_money
from app.utils.serializers import order_summary_out

router = APIRouter()


@router.get("")
def dashboard(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    total_orders = session.exec(select(func.count(Order.id))).one()

    pending_orders = session.exec(
        select(func.count(Order.id)).where(
            Order.status.in_([OrderStatus.pending, OrderStatus.confirmed, OrderStatus.processing])
        )
    ).one()

    # cancelled orders never count as revenue
    revenue = session.exec(
        select(func.coalesce(func.sum(Order.total_amount), 0)).where(
            Order.status != OrderStatus.cancelled
        )
    ).one()

    total_products = session.exec(select(func.count(Product.id))).one()
    low_stock = session.exec(
        select(func.count(Product.id)).where(Product.stock <= settings.low_stock_threshold)
    ).one()

    total_customers = session.exec(
        select(func.count(User.id)).where(User.role == "client")
    ).one()

    recent = session.exec(
        select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(5)
    ).all()

    return {
        "total_orders": total_orders,
        "pending_orders": pending_orders,
        "total_revenue": format_money(revenue),
        "total_products": total_products,
        "low_stock_products": low_stock,
        "total_customers": total_customers,
        "recent_orders": [order_summary_out(o) for o in recent],
    }
