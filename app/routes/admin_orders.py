# -------- ADMIN ORDERS --------
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, or_, select
from app.constants.order_status import OrderStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.errors import InvalidStatusTransition
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.payment import Payment
from app.models.user import User
from app.notifications import OrderEvent, dispatch_order_event
from app.schemas.orders_schemas import OrderStatusUpdate
from app.services.invoice_service import get_invoice_for_order
from app.services.order_event_service import get_order_timeline
from app.services.order_service import update_order_status
from app.services.pricing import format_money
from app.services.shipment_service import get_shipment_for_order, sync_shipment_with_order
from app.utils.pagination import paginate
from app.utils.serializers import order_detail_out

logger = logging.getLogger(__name__)

router = APIRouter()


def _order_row_out(row) -> dict:
    o, u = row
    return {
        "order_id": o.id,
        "order_number": o.order_number,
        "customer_name": u.full_name or u.username,
        "customer_email": u.email,
        "date": o.created_at.date(),
        "total_amount": format_money(o.total_amount),
        "status": o.status,
    }


@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    query = (
        select(Order, User)
        .join(User, User.id == Order.user_id)
    )

    if search:
        query = query.where(
            or_(
                Order.order_number.ilike(f"%{search}%"),
                User.email.ilike(f"%{search}%"),
                User.first_name.ilike(f"%{search}%"),
                User.last_name.ilike(f"%{search}%"),
            )
        )

    if status:
        query = query.where(Order.status == status)

    if start_date:
        query = query.where(Order.created_at >= start_date)

    if end_date:
        query = query.where(Order.created_at <= end_date)

    query = query.order_by(Order.created_at.desc(), Order.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit, serializer=_order_row_out)


@router.get("/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    result = session.exec(
        select(Order, User)
        .join(User, User.id == Order.user_id)
        .where(Order.id == order_id)
    ).first()

    if not result:
        raise HTTPException(status_code=404, detail="Order not found")

    order, user = result
    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()

    return {
        **order_detail_out(
            order,
            items,
            payment=payment,
            shipment=get_shipment_for_order(session, order.id),
            invoice=get_invoice_for_order(session, order.id),
        ),
        "customer": {
            "id": user.id,
            "name": user.full_name or user.username,
            "email": user.email,
            "phone": user.phone,
        },
        "timeline": get_order_timeline(session, order.id),
    }


@router.patch("/{order_id}/status")
def update_status(
    order_id: int,
    data: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = session.get(Order, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    previous = OrderStatus(order.status)

    try:
        order = update_order_status(session, order, data.status, changed_by=f"admin:{admin.id}")
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=400, detail=str(e))

    sync_shipment_with_order(session, order)

    dispatch_order_event(
        event=OrderEvent.ORDER_STATUS_CHANGED,
        session=session,
        order=order,
        extra={"from": previous.value, "to": order.status.value},
    )

    logger.info(f"Admin {admin.id} moved order {order.id} from {previous.value} to {order.status.value}")

    return {
        "message": "Order status updated",
        "order_id": order.id,
        "old_status": previous.value,
        "new_status": order.status.value,
    }
