from typing import List

from sqlalchemy import delete
from sqlmodel import Session, select

from app.errors import ProductUnavailable
from app.models.cart import CartItem
from app.models.product import Product
from app.schemas.checkout_schemas import CartLine


def get_cart_lines(session: Session, user_id: int, strict: bool = True) -> List[CartLine]:
    """
    Snapshot the user's cart with current catalog prices.

    With `strict`, a line pointing at a deleted or deactivated product
    raises ProductUnavailable instead of being skipped.
    """
    rows = session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id, isouter=True)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()

    lines = []
    for cart_item, product in rows:
        if product is None or not product.is_active:
            if strict:
                raise ProductUnavailable(cart_item.product_id)
            continue

        lines.append(
            CartLine(
                product_id=product.id,
                quantity=cart_item.quantity,
                unit_price=product.price,
                product_name=product.name,
                product_image=product.image_url,
            )
        )

    return lines


# Clear Cart
def clear_cart(session: Session, user_id: int) -> None:
    try:
        session.execute(delete(CartItem).where(CartItem.user_id == user_id))
        session.commit()
    except Exception:
        session.rollback()
        raise
