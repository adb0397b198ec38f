import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from app.config import settings
from app.database import get_session
from app.errors import (
    CheckoutValidationError,
    InsufficientStock,
    OrderCreationFailed,
    StorefrontError,
)
from app.models.payment_method import PaymentMethod
from app.models.user import User
from app.schemas.checkout_schemas import (
    CheckoutSummary,
    CheckoutSummaryLine,
    CheckoutWarningOut,
    PlaceOrderRequest,
    PlaceOrderResponse,
)
from app.services.cart_service import get_cart_lines
from app.services.checkout_service import checkout_cart
from app.services.pricing import from_minor_units, line_total_minor, pricing_from_settings
from app.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

ORDER_FAILED_MESSAGE = "Order could not be placed. Nothing was charged."


def _to_http(e: StorefrontError) -> HTTPException:
    if isinstance(e, InsufficientStock):
        return HTTPException(409, {
            "error": "InsufficientStock",
            "message": str(e),
            "product_id": e.product_id,
            "requested": e.requested,
            "available": e.available,
        })
    if isinstance(e, CheckoutValidationError):
        return HTTPException(400, {"error": type(e).__name__, "message": str(e)})
    if isinstance(e, OrderCreationFailed):
        return HTTPException(500, {"error": type(e).__name__, "message": ORDER_FAILED_MESSAGE})
    return HTTPException(400, {"error": type(e).__name__, "message": str(e)})


# Cart page -> order summary before confirming

@router.get("/summary", response_model=CheckoutSummary)
def checkout_summary(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    try:
        lines = get_cart_lines(session, current_user.id)
        pricing = pricing_from_settings(lines, settings)
    except StorefrontError as e:
        raise _to_http(e)

    return CheckoutSummary(
        items=[
            CheckoutSummaryLine(
                product_id=line.product_id,
                product_name=line.product_name,
                product_image=line.product_image,
                unit_price=line.unit_price,
                quantity=line.quantity,
                line_total=from_minor_units(line_total_minor(line)),
            )
            for line in lines
        ],
        pricing=pricing,
    )


@router.post("/place-order", response_model=PlaceOrderResponse)
def place_order(
    data: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    payment_method = data.payment_method
    if data.payment_method_id is not None:
        saved = session.get(PaymentMethod, data.payment_method_id)
        if not saved or saved.user_id != current_user.id:
            raise HTTPException(status_code=404, detail="Payment method not found")
        payment_method = saved.type

    try:
        result = checkout_cart(
            session,
            user_id=current_user.id,
            shipping=data.shipping,
            payment_method=payment_method,
        )
    except StorefrontError as e:
        logger.info(f"Checkout rejected for user {current_user.id}: {e}")
        raise _to_http(e)

    return PlaceOrderResponse(
        message="Order placed successfully",
        order_id=result.order_id,
        order_number=result.order_number,
        status=result.status.value,
        pricing=result.pricing,
        warnings=[CheckoutWarningOut(stage=w.stage, message=w.message) for w in result.warnings],
        needs_followup=result.needs_followup,
    )
