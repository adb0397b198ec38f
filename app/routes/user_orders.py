from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlmodel import Session, select
from app.database import get_session
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.payment import Payment
from app.models.user import User
from app.services.invoice_service import get_invoice_for_order, load_invoice_pdf
from app.services.order_event_service import get_order_timeline
from app.services.order_service import get_order_for_user
from app.services.shipment_service import get_shipment_for_order
from app.utils.pagination import paginate
from app.utils.serializers import invoice_out, order_detail_out, order_item_out, order_summary_out
from app.utils.token import get_current_user

router = APIRouter()


def _owned_order(session: Session, order_id: int, user: User) -> Order:
    order = get_order_for_user(session, order_id, user.id)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


@router.get("")
def my_orders(
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    query = (
        select(Order)
        .where(Order.user_id == current_user.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )
    return paginate(session=session, query=query, page=page, limit=limit, serializer=order_summary_out)


@router.get("/{order_id}")
def my_order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = _owned_order(session, order_id, current_user)

    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()
    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()

    data = order_detail_out(
        order,
        items,
        payment=payment,
        shipment=get_shipment_for_order(session, order.id),
        invoice=get_invoice_for_order(session, order.id),
    )
    data["timeline"] = [
        {"event_type": e.event_type, "label": e.label, "created_at": e.created_at}
        for e in get_order_timeline(session, order.id)
    ]
    return data


#View Invoice 
@router.get("/{order_id}/invoice")
def get_invoice(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = _owned_order(session, order_id, current_user)

    invoice = get_invoice_for_order(session, order.id)
    if not invoice:
        raise HTTPException(404, "Invoice not available yet")

    items = session.exec(select(OrderItem).where(OrderItem.order_id == order.id)).all()

    return {
        **invoice_out(invoice),
        "order_number": order.order_number,
        "items": [order_item_out(i) for i in items],
    }


@router.get("/{order_id}/invoice/download")
def download_invoice_pdf(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = _owned_order(session, order_id, current_user)

    invoice = get_invoice_for_order(session, order.id)
    if not invoice:
        raise HTTPException(404, "Invoice not available yet")

    file_path = load_invoice_pdf(session, invoice, order)

    return FileResponse(
        str(file_path),
        media_type="application/pdf",
        filename=f"{invoice.invoice_number}.pdf"
    )
