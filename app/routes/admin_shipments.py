from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.constants.order_status import ShipmentStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.errors import InvalidStatusTransition
from app.models.order import Order
from app.models.shipment import Shipment
from app.models.user import User
from app.notifications import OrderEvent, dispatch_order_event
from app.schemas.orders_schemas import ShipmentStatusUpdate, ShipmentUpdate
from app.services.shipment_service import update_shipment_status
from app.utils.pagination import paginate
from app.utils.serializers import shipment_out

router = APIRouter()


@router.get("")
def list_shipments(
    page: int = 1,
    limit: int = 20,
    status: Optional[ShipmentStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Shipment)
    if status:
        query = query.where(Shipment.status == status)

    query = query.order_by(Shipment.updated_at.desc(), Shipment.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit, serializer=shipment_out)


@router.patch("/{shipment_id}/status")
def change_shipment_status(
    shipment_id: int,
    data: ShipmentStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    shipment = session.get(Shipment, shipment_id)
    if not shipment:
        raise HTTPException(404, "Shipment not found")

    try:
        shipment = update_shipment_status(session, shipment, data.status, changed_by=f"admin:{admin.id}")
    except InvalidStatusTransition as e:
        raise HTTPException(400, str(e))

    order = session.get(Order, shipment.order_id)
    dispatch_order_event(
        event=OrderEvent.SHIPMENT_UPDATED,
        session=session,
        order=order,
        extra={"shipment_status": shipment.status.value, "tracking_number": shipment.tracking_number},
    )

    return {
        **shipment_out(shipment),
        "order_status": order.status if order else None,
    }


@router.patch("/{shipment_id}")
def update_shipment(
    shipment_id: int,
    data: ShipmentUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    shipment = session.get(Shipment, shipment_id)
    if not shipment:
        raise HTTPException(404, "Shipment not found")

    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(400, "Nothing to update")

    for field, value in updates.items():
        setattr(shipment, field, value)
    shipment.updated_at = datetime.utcnow()

    session.add(shipment)
    session.commit()
    session.refresh(shipment)

    return shipment_out(shipment)
