# backend/routes/cart.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from schemas.cart import CartAddItem, CartItemOut, CartSummary, CartUpdateItem
from schemas.user import CurrentUser
from services import cart as cart_service
from utils.errors import Forbidden, NotFound, server_error
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/cart", tags=["Cart"])
logger = logging.getLogger(__name__)


def _ensure_owner(current_user: CurrentUser, user_id: int):
    # Callers may only touch their own cart
    if current_user.id != user_id:
        raise Forbidden("You are not allowed to access this cart")


def _item_out(item) -> dict:
    return CartItemOut.model_validate(item).model_dump(mode="json")


@router.get("/user/{user_id}")
def get_cart_by_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _ensure_owner(current_user, user_id)
    try:
        items = cart_service.list_cart(db, user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch cart for user %s", user_id)
        raise server_error("Failed to fetch cart items", exc)

    return {
        "success": True,
        "count": len(items),
        "cart": [_item_out(i) for i in items],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Add a product, or grow the quantity of the row already holding it
@router.post("")
def add_to_cart(
    payload: CartAddItem,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    user_id = payload.user_id if payload.user_id is not None else current_user.id
    _ensure_owner(current_user, user_id)

    try:
        item, created = cart_service.add_or_increment(
            db,
            user_id,
            payload.product_id,
            quantity=payload.quantity,
            product_name=payload.product_name,
            product_price=payload.product_price,
            product_image=payload.product_image,
        )
    except cart_service.ProductNotFoundError:
        raise NotFound("Product not found")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to add product %s to cart of user %s", payload.product_id, user_id)
        raise server_error("Failed to add item to cart", exc)

    return {
        "success": True,
        "message": "Item added to cart" if created else "Cart item updated",
        "cartItem": _item_out(item),
    }


@router.put("/{item_id}")
def update_cart_item(
    item_id: int,
    payload: CartUpdateItem,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        item = cart_service.update_quantity(db, current_user.id, item_id, payload.quantity)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update cart item %s", item_id)
        raise server_error("Failed to update cart item", exc)

    if item is None:
        raise NotFound("Cart item not found")
    return {"success": True, "message": "Cart item updated", "cartItem": _item_out(item)}


# Clearing is registered before /{item_id} so both DELETE routes resolve
@router.delete("/clear/{user_id}")
def clear_cart(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _ensure_owner(current_user, user_id)
    try:
        cleared = cart_service.clear_cart(db, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to clear cart of user %s", user_id)
        raise server_error("Failed to clear cart", exc)

    return {
        "success": True,
        "message": f"Cleared {len(cleared)} items from cart",
        "clearedItems": [c.model_dump(mode="json") for c in cleared],
        "count": len(cleared),
    }


@router.delete("/{item_id}")
def remove_from_cart(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        removed = cart_service.remove_item(db, current_user.id, item_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to remove cart item %s", item_id)
        raise server_error("Failed to remove item from cart", exc)

    if removed is None:
        raise NotFound("Cart item not found")
    return {"success": True, "message": "Item removed from cart", "cartItem": removed.model_dump(mode="json")}


@router.get("/summary/{user_id}")
def get_cart_summary(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _ensure_owner(current_user, user_id)
    try:
        summary = cart_service.cart_summary(db, user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to summarize cart of user %s", user_id)
        raise server_error("Failed to get cart summary", exc)

    return {"success": True, "summary": CartSummary(**summary).model_dump()}
