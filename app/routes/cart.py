from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from app.config import settings
from app.database import get_session
from app.errors import StorefrontError
from app.models.cart import CartItem
from app.models.product import Product
from app.models.user import User
from app.schemas.cart_schemas import CartAddRequest, CartUpdateRequest
from app.services.cart_service import clear_cart, get_cart_lines
from app.services.pricing import format_money, pricing_from_settings
from app.utils.token import get_current_user  # JWT dependency


router = APIRouter()

# Add to Cart 

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if data.quantity <= 0:
        raise HTTPException(400, "Quantity must be at least 1")

    product = session.get(Product, data.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    # Check if the user already has this item
    existing_item = session.exec(
        select(CartItem).where(
            CartItem.user_id == current_user.id,
            CartItem.product_id == data.product_id
        )
    ).first()

    if existing_item:
        existing_item.quantity += data.quantity
        session.add(existing_item)
        session.commit()
        session.refresh(existing_item)
        return {"message": "Cart updated", "item_id": existing_item.id, "quantity": existing_item.quantity}

    new_item = CartItem(
        user_id=current_user.id,
        product_id=product.id,
        quantity=data.quantity,
    )

    session.add(new_item)
    session.commit()
    session.refresh(new_item)

    return {"message": "Added to cart", "item_id": new_item.id, "quantity": new_item.quantity}


# View Cart 

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    rows = session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_id == current_user.id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()

    items = [
        {
            "item_id": cart_item.id,
            "product_id": product.id,
            "product_name": product.name,
            "product_image": product.image_url,
            "unit_price": format_money(product.price),
            "quantity": cart_item.quantity,
            "stock": product.stock,
            "in_stock": product.in_stock and product.stock >= cart_item.quantity,
            "available": product.is_active,
            "line_total": format_money(product.price * cart_item.quantity),
        }
        for cart_item, product in rows
    ]

    summary = None
    lines = get_cart_lines(session, current_user.id, strict=False)
    if lines:
        try:
            summary = pricing_from_settings(lines, settings).model_dump(mode="json")
        except StorefrontError as e:
            raise HTTPException(400, str(e))

    return {
        "items": items,
        "total_items": sum(i["quantity"] for i in items),
        "summary": summary,
    }

# Update Cart 
@router.put("/update/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = session.get(CartItem, item_id)

    if not item or item.user_id != current_user.id:
        raise HTTPException(404, "Cart item not found")

    if data.quantity <= 0:
        session.delete(item)
        session.commit()
        return {"message": "Item removed"}

    item.quantity = data.quantity
    session.add(item)
    session.commit()
    session.refresh(item)

    return {"message": "Quantity updated", "item_id": item.id, "quantity": item.quantity}

# Remove Cart 

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = session.get(CartItem, item_id)

    if not item or item.user_id != current_user.id:
        raise HTTPException(404, "Item not found")

    session.delete(item)
    session.commit()

    return {"message": "Item removed from cart"}


@router.delete("/clear")
def clear_cart_endpoint(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clear_cart(session, current_user.id)
    return {"message": "Cart cleared"}
