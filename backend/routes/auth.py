# backend/routes/auth.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from schemas import user as schemas
from services import users as user_service
from utils.errors import AuthenticationFailed, Conflict, NotFound, ValidationFailed, server_error
from utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


def _conflict(exc: user_service.UserConflictError) -> Conflict:
    extra = {}
    if exc.existing:
        extra["existing"] = exc.existing
    if exc.detail:
        extra["detail"] = exc.detail
    return Conflict("User with this email or username already exists", extra=extra)


# Register a new user and sign them in
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, db: Session = Depends(get_db)):
    try:
        user = user_service.register_user(db, payload.username, payload.email, payload.password)
    except user_service.UserConflictError as exc:
        logger.warning("Registration rejected for %s / %s: already exists", payload.username, payload.email)
        raise _conflict(exc)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Registration failed for %s", payload.email)
        raise server_error("Registration failed", exc)

    return {
        "success": True,
        "message": "User registered successfully",
        "user": schemas.UserResponse.model_validate(user).model_dump(mode="json"),
        "token": create_access_token(user),
    }


# Authenticate user and issue JWT token
@router.post("/login")
def login(payload: schemas.UserLogin, db: Session = Depends(get_db)):
    try:
        user = user_service.authenticate_user(db, payload.email, payload.password)
    except SQLAlchemyError as exc:
        logger.exception("Login failed for %s", payload.email)
        raise server_error("Login failed", exc)

    # Same answer for unknown email and wrong password
    if user is None:
        logger.warning("Invalid login attempt for %s", payload.email)
        raise AuthenticationFailed("Invalid email or password")

    logger.info("User %s logged in", user.username)
    return {
        "success": True,
        "message": "Login successful",
        "user": schemas.UserProfile.model_validate(user).model_dump(mode="json"),
        "token": create_access_token(user),
    }


# Retrieve current authenticated user details
@router.get("/profile")
def get_profile(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = user_service.get_user(db, current_user.id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch profile for user %s", current_user.id)
        raise server_error("Failed to fetch profile", exc)

    if user is None:
        raise NotFound("User not found")
    return {"success": True, "data": schemas.UserProfile.model_validate(user).model_dump(mode="json")}


# Update name (username), email, phone and address of the current user
@router.put("/profile")
def update_profile(
    payload: schemas.ProfileUpdate,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    patch = user_service.UserPatch(
        username=payload.name,
        email=payload.email,
        phone=payload.phone,
        address=payload.address,
    )
    try:
        user = user_service.apply_user_patch(db, current_user.id, patch)
    except user_service.NothingToUpdateError:
        raise ValidationFailed("Nothing to update")
    except user_service.UserConflictError as exc:
        raise _conflict(exc)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update profile for user %s", current_user.id)
        raise server_error("Failed to update profile", exc)

    if user is None:
        raise NotFound("User not found")
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": {"user": schemas.UserProfile.model_validate(user).model_dump(mode="json")},
    }


# Connectivity probe used by the frontend; echoes the body back
@router.post("/test/register")
async def test_register(request: Request):
    try:
        received = await request.json()
    except ValueError:
        received = None
    return {
        "success": True,
        "message": "Test endpoint working",
        "received": received,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "server": "Caffinity Backend",
    }
