# -------- ADMIN NOTIFICATIONS --------
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.notifications import Notification, RecipientRole
from app.models.user import User
from app.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_notifications(
    page: int = 1,
    limit: int = 20,
    unread: Optional[bool] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Notification).where(Notification.recipient_role == RecipientRole.admin)

    if unread is not None:
        query = query.where(Notification.is_read == (not unread))

    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit)


@router.patch("/{notification_id}/read")
def mark_read(
    notification_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    notification = session.get(Notification, notification_id)
    if not notification or notification.recipient_role != RecipientRole.admin:
        raise HTTPException(404, "Notification not found")

    notification.is_read = True
    session.add(notification)
    session.commit()

    return {"message": "Notification marked as read", "id": notification.id}
