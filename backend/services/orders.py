# backend/services/orders.py
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models.cart import CartItem
from models.order import Order, OrderItem, ORDER_STATUS_PENDING, ORDER_STATUS_COMPLETED

logger = logging.getLogger(__name__)


class EmptyCartError(Exception):
    pass


class OrderAssemblyError(Exception):
    pass


# Sum of price snapshot x quantity over cart rows
def cart_total(rows: Iterable[CartItem]) -> float:
    return round(sum(float(row.product_price or 0) * int(row.quantity or 0) for row in rows), 2)


def _order_item_from_cart_row(order: Order, row: CartItem) -> OrderItem:
    return OrderItem(
        order_id=order.id,
        product_id=row.product_id,
        product_name=row.product_name,
        product_price=row.product_price,
        quantity=row.quantity,
    )


def assemble_order(
    db: Session,
    user_id: int,
    shipping_address: Optional[str] = None,
    payment_method: Optional[str] = None,
) -> Order:
    """
    Turn the user's cart into an order with one item per cart row, then empty the cart.

    Everything runs in the session's transaction: either the order, all of its items and the
    cart deletion are committed together, or the transaction is rolled back and nothing changes.
    Raises EmptyCartError when there is nothing to order and OrderAssemblyError on any other failure.
    """
    try:
        rows = (
            db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.added_at.asc(), CartItem.id.asc())
            .all()
        )
        if not rows:
            db.rollback()
            raise EmptyCartError("Cart is empty")

        order = Order(
            user_id=user_id,
            total_amount=cart_total(rows),
            status=ORDER_STATUS_PENDING,
            shipping_address=shipping_address or None,
            payment_method=payment_method or None,
        )
        db.add(order)
        db.flush()

        # One insert per cart row, in cart order
        for row in rows:
            db.add(_order_item_from_cart_row(order, row))
            db.flush()

        db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
        db.commit()
    except EmptyCartError:
        raise
    except Exception as exc:
        db.rollback()
        logger.exception("Order assembly failed for user %s, transaction rolled back", user_id)
        raise OrderAssemblyError(str(exc)) from exc

    db.refresh(order)
    logger.info("Created order %s with %s items for user %s", order.id, len(rows), user_id)
    return order


def list_orders(db: Session, user_id: int) -> List[Order]:
    return (
        db.query(Order)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_order(db: Session, user_id: int, order_id: int) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id, Order.user_id == user_id).first()


def confirm_order(db: Session, user_id: int, order_id: int) -> Optional[Order]:
    # Single statement; the owner check is part of the WHERE clause
    updated = (
        db.query(Order)
        .filter(Order.id == order_id, Order.user_id == user_id)
        .update({Order.status: ORDER_STATUS_COMPLETED}, synchronize_session=False)
    )
    db.commit()
    if not updated:
        return None
    logger.info("Order %s confirmed as completed by user %s", order_id, user_id)
    return db.get(Order, order_id)
