import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import update
from sqlmodel import Session, select
from app.database import get_session
from app.models.payment_method import PaymentMethod
from app.models.user import User
from app.schemas.user_schemas import PaymentMethodCreate, ProfileUpdate
from app.utils.token import current_identity, get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)


# -------- USER PROFILE --------

def _profile(user: User) -> dict:
    return {
        **current_identity(user),
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone": user.phone,
        "address": user.address,
        "city": user.city,
        "postal_code": user.postal_code,
        "country": user.country,
        "created_at": user.created_at,
    }


@router.get("/me")
def get_my_profile(current_user: User = Depends(get_current_user)):
    return _profile(current_user)


@router.put("/update-profile")
def update_user_profile(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return {"message": "Profile updated successfully", "user": _profile(current_user)}


# -------- SAVED PAYMENT METHODS --------

def _get_own_method(session: Session, method_id: int, user_id: int) -> PaymentMethod:
    method = session.get(PaymentMethod, method_id)
    if not method or method.user_id != user_id:
        raise HTTPException(status_code=404, detail="Payment method not found")
    return method


@router.get("/payment-methods")
def list_payment_methods(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return session.exec(
        select(PaymentMethod)
        .where(PaymentMethod.user_id == current_user.id)
        .order_by(PaymentMethod.is_default.desc(), PaymentMethod.created_at.desc())
    ).all()


@router.post("/payment-methods", status_code=201)
def add_payment_method(
    data: PaymentMethodCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    has_methods = session.exec(
        select(PaymentMethod.id).where(PaymentMethod.user_id == current_user.id)
    ).first()

    method = PaymentMethod(
        user_id=current_user.id,
        **data.model_dump(),
        is_default=has_methods is None,
    )
    session.add(method)
    session.commit()
    session.refresh(method)

    logger.info(f"User {current_user.id} saved payment method {method.id} ({method.type})")
    return method


@router.delete("/payment-methods/{method_id}")
def delete_payment_method(
    method_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    method = _get_own_method(session, method_id, current_user.id)
    was_default = method.is_default
    session.delete(method)
    session.flush()

    if was_default:
        newest = session.exec(
            select(PaymentMethod)
            .where(PaymentMethod.user_id == current_user.id)
            .order_by(PaymentMethod.created_at.desc(), PaymentMethod.id.desc())
        ).first()
        if newest:
            newest.is_default = True
            session.add(newest)

    session.commit()
    return {"message": "Payment method removed"}


@router.patch("/payment-methods/{method_id}/default")
def set_default_payment_method(
    method_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    method = _get_own_method(session, method_id, current_user.id)

    session.execute(
        update(PaymentMethod)
        .where(PaymentMethod.user_id == current_user.id, PaymentMethod.id != method.id)
        .values(is_default=False)
    )
    method.is_default = True
    session.add(method)
    session.commit()
    session.refresh(method)

    return {"message": "Default payment method updated", "payment_method": method}
