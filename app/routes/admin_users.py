from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, func, or_, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.order import Order
from app.models.user import User
from app.schemas.user_schemas import LoginAccessUpdate, RoleUpdate
from app.services.pricing import format_money
from app.utils.pagination import paginate
from app.utils.serializers import order_summary_out

router = APIRouter()


def _user_row_out(row) -> dict:
    u, order_count, total_spent = row
    return {
        "id": u.id,
        "name": u.full_name or u.username,
        "email": u.email,
        "role": u.role,
        "can_login": u.can_login,
        "total_orders": order_count,
        "total_spent": format_money(total_spent or 0),
        "created_at": u.created_at,
    }


@router.get("")
def list_users(
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = (
        select(
            User,
            func.count(Order.id).label("order_count"),
            func.coalesce(func.sum(Order.total_amount), 0).label("total_spent"),
        )
        .outerjoin(Order, Order.user_id == User.id)
        .group_by(User.id)
    )

    if search:
        query = query.where(
            or_(
                User.email.ilike(f"%{search}%"),
                User.first_name.ilike(f"%{search}%"),
                User.last_name.ilike(f"%{search}%"),
            )
        )

    query = query.order_by(User.created_at.desc(), User.id.desc())
    return paginate(session=session, query=query, page=page, limit=limit, serializer=_user_row_out)


@router.get("/{user_id}/orders")
def user_orders(
    user_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    orders = session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    ).all()

    return {
        "user_id": user.id,
        "email": user.email,
        "orders": [order_summary_out(o) for o in orders],
    }


@router.patch("/{user_id}/role")
def update_role(
    user_id: int,
    data: RoleUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    if user.id == admin.id and data.role != "admin":
        raise HTTPException(400, "You cannot remove your own admin role")

    user.role = data.role
    session.add(user)
    session.commit()

    return {"message": "Role updated", "user_id": user.id, "role": user.role}


@router.patch("/{user_id}/login-access")
def update_login_access(
    user_id: int,
    data: LoginAccessUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    if user.id == admin.id and not data.can_login:
        raise HTTPException(400, "You cannot disable your own login")

    user.can_login = data.can_login
    session.add(user)
    session.commit()

    return {"message": "Login access updated", "user_id": user.id, "can_login": user.can_login}
