# backend/routes/orders.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order
from schemas.order import OrderCreatePayload, OrderItemOut, OrderOut
from schemas.user import CurrentUser
from services import orders as order_service
from utils.errors import APIError, NotFound, ValidationFailed, server_error
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/orders", tags=["Orders"])
logger = logging.getLogger(__name__)


def _order_out(order: Order) -> dict:
    return OrderOut.model_validate(order).model_dump(mode="json")


# Map an order with its line items to the response payload
def _order_with_items(order: Order) -> dict:
    return {
        "order": _order_out(order),
        "items": [OrderItemOut.model_validate(it).model_dump(mode="json") for it in order.items],
    }


# Create an order from the caller's cart
@router.post("", status_code=status.HTTP_201_CREATED)
def create_order_from_cart(
    payload: Optional[OrderCreatePayload] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    payload = payload or OrderCreatePayload()
    try:
        order = order_service.assemble_order(
            db,
            current_user.id,
            shipping_address=payload.shipping_address,
            payment_method=payload.payment_method,
        )
    except order_service.EmptyCartError:
        raise ValidationFailed("Cart is empty")
    except order_service.OrderAssemblyError as exc:
        raise APIError(str(exc), message="Failed to create order from cart")

    return {
        "success": True,
        "message": "Order created successfully",
        "data": _order_with_items(order),
    }


# List the caller's orders, newest first
@router.get("")
def get_user_orders(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        orders = order_service.list_orders(db, current_user.id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to get orders for user %s", current_user.id)
        raise server_error("Failed to get user orders", exc)

    return {"success": True, "count": len(orders), "data": [_order_out(o) for o in orders]}


# Order header with its items; other users' orders are reported as missing
@router.get("/{order_id}")
def get_order_detail(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        order = order_service.get_order(db, current_user.id, order_id)
        data = _order_with_items(order) if order else None
    except SQLAlchemyError as exc:
        logger.exception("Failed to get order %s", order_id)
        raise server_error("Failed to get order details", exc)

    if data is None:
        raise NotFound("Order not found")
    return {"success": True, "data": data}


# The customer confirms the order has arrived
@router.put("/{order_id}/confirm")
def confirm_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        order = order_service.confirm_order(db, current_user.id, order_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to confirm order %s", order_id)
        raise server_error("Failed to confirm order", exc)

    if order is None:
        raise NotFound("Order not found")
    return {"success": True, "message": "Order confirmed as completed", "data": _order_out(order)}
