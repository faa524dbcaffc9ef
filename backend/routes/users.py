# backend/routes/users.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
from schemas.user import CurrentUser, UserResponse, UserUpdate
from services import users as user_service
from utils.errors import APIError, Conflict, Forbidden, NotFound, ValidationFailed, server_error
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/users", tags=["Users"])
logger = logging.getLogger(__name__)


def _user_out(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


# List every registered user, newest first
@router.get("")
def get_all_users(db: Session = Depends(get_db)):
    try:
        users = user_service.list_users(db)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch users")
        raise server_error("Failed to fetch users", exc)

    return {
        "success": True,
        "count": len(users),
        "users": [_user_out(u) for u in users],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Registered before /{user_id} so "profile" is never parsed as an id
@router.get("/profile")
def get_user_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = user_service.get_user(db, current_user.id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch profile for user %s", current_user.id)
        raise server_error("Failed to fetch profile", exc)

    if user is None:
        raise NotFound("User not found")
    return {"success": True, "user": _user_out(user)}


# Connection check with table row counts
@router.get("/debug/db-check")
def db_check(db: Session = Depends(get_db)):
    try:
        users = db.query(func.count(User.id)).scalar()
        products = db.query(func.count(Product.id)).scalar()
    except SQLAlchemyError as exc:
        logger.exception("Database check failed")
        raise APIError("Database check failed", debug=str(exc), extra={"database": "disconnected"})

    return {
        "success": True,
        "database": "connected",
        "tables": {"users": users, "products": products},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/{user_id}")
def get_user_by_id(user_id: int, db: Session = Depends(get_db)):
    try:
        user = user_service.get_user(db, user_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch user %s", user_id)
        raise server_error("Failed to fetch user", exc)

    if user is None:
        raise NotFound("User not found")
    return {"success": True, "user": _user_out(user)}


# Update username / email; a user may only update themselves
@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if current_user.id != user_id:
        raise Forbidden("You are not allowed to update this user")

    patch = user_service.UserPatch(username=payload.username, email=payload.email)
    try:
        user = user_service.apply_user_patch(db, user_id, patch)
    except user_service.NothingToUpdateError:
        raise ValidationFailed("Nothing to update")
    except user_service.UserConflictError as exc:
        extra = {"existing": exc.existing} if exc.existing else {}
        raise Conflict("User with this email or username already exists", extra=extra)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update user %s", user_id)
        raise server_error("Failed to update user", exc)

    if user is None:
        raise NotFound("User not found")
    return {"success": True, "message": "User updated successfully", "user": _user_out(user)}
