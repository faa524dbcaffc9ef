# backend/services/cart.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.cart import CartItem
from models.product import Product
from schemas.cart import CartItemOut

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    pass


def list_cart(db: Session, user_id: int) -> List[CartItem]:
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id)
        .order_by(CartItem.added_at.desc(), CartItem.id.desc())
        .all()
    )


def get_cart_item(db: Session, user_id: int, item_id: int) -> Optional[CartItem]:
    return db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()


def _product_snapshot(db: Session, product_id: int, name: Optional[str], price: Optional[float], image: Optional[str]):
    if name is not None and price is not None:
        return name, price, image

    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return (
        name if name is not None else product.name,
        price if price is not None else product.price,
        image if image is not None else product.image_url,
    )


def add_or_increment(
    db: Session,
    user_id: int,
    product_id: int,
    quantity: int = 1,
    product_name: Optional[str] = None,
    product_price: Optional[float] = None,
    product_image: Optional[str] = None,
) -> Tuple[CartItem, bool]:
    """Upsert the (user, product) row. Returns the row and whether it was newly created."""
    item = db.query(CartItem).filter(CartItem.user_id == user_id, CartItem.product_id == product_id).first()

    if item:
        item.quantity = CartItem.quantity + quantity
        item.added_at = func.now()
        created = False
    else:
        name, price, image = _product_snapshot(db, product_id, product_name, product_price, product_image)
        item = CartItem(
            user_id=user_id,
            product_id=product_id,
            product_name=name,
            product_price=price,
            product_image=image,
            quantity=quantity,
        )
        db.add(item)
        created = True

    db.commit()
    db.refresh(item)
    logger.info(
        "%s cart item %s for user %s (product %s, qty %s)",
        "Added" if created else "Incremented", item.id, user_id, product_id, item.quantity,
    )
    return item, created


def update_quantity(db: Session, user_id: int, item_id: int, quantity: int) -> Optional[CartItem]:
    item = get_cart_item(db, user_id, item_id)
    if item is None:
        return None
    item.quantity = quantity
    db.commit()
    db.refresh(item)
    return item


def remove_item(db: Session, user_id: int, item_id: int) -> Optional[CartItemOut]:
    item = get_cart_item(db, user_id, item_id)
    if item is None:
        return None
    removed = CartItemOut.model_validate(item)
    db.delete(item)
    db.commit()
    return removed


def clear_cart(db: Session, user_id: int) -> List[CartItemOut]:
    items = list_cart(db, user_id)
    cleared = [CartItemOut.model_validate(item) for item in items]
    for item in items:
        db.delete(item)
    db.commit()
    logger.info("Cleared %s cart items for user %s", len(cleared), user_id)
    return cleared


def cart_summary(db: Session, user_id: int) -> dict:
    total_items, total_quantity, total_price = (
        db.query(
            func.count(CartItem.id),
            func.coalesce(func.sum(CartItem.quantity), 0),
            func.coalesce(func.sum(CartItem.product_price * CartItem.quantity), 0),
        )
        .filter(CartItem.user_id == user_id)
        .one()
    )
    return {
        "total_items": int(total_items or 0),
        "total_quantity": int(total_quantity or 0),
        "total_price": round(float(total_price or 0), 2),
    }
