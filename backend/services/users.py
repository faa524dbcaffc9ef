# backend/services/users.py
import logging
from typing import Dict, Optional

from pydantic import BaseModel
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.users import User
from utils.hashing import get_password_hash, verify_password

logger = logging.getLogger(__name__)

# Columns a patch may touch, in the order they are applied
PATCHABLE_FIELDS = ("username", "email", "phone", "address")


class NothingToUpdateError(Exception):
    pass


class UserConflictError(Exception):
    def __init__(self, existing: Optional[Dict] = None, detail: Optional[str] = None):
        self.existing = existing
        self.detail = detail
        super().__init__("User with this email or username already exists")


class UserPatch(BaseModel):
    """Optional user fields; a field is present when it holds a non-empty value."""

    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    def present_fields(self) -> Dict[str, str]:
        values = {}
        for field in PATCHABLE_FIELDS:
            value = getattr(self, field)
            if value is not None and value != "":
                values[field] = value
        return values


def _identity(user: User) -> Dict:
    return {"id": user.id, "username": user.username, "email": user.email}


def find_conflicting_user(
    db: Session, username: Optional[str], email: Optional[str], exclude_id: Optional[int] = None
) -> Optional[User]:
    clauses = []
    if username:
        clauses.append(User.username == username)
    if email:
        clauses.append(User.email == email)
    if not clauses:
        return None

    query = db.query(User).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first()


def register_user(db: Session, username: str, email: str, password: str) -> User:
    existing = find_conflicting_user(db, username, email)
    if existing:
        raise UserConflictError(existing=_identity(existing))

    user = User(username=username, email=email, password=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race against a concurrent registration
        db.rollback()
        raise UserConflictError(detail=str(exc.orig)) from exc
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.password):
        return None
    return user


def list_users(db: Session):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def apply_user_patch(db: Session, user_id: int, patch: UserPatch) -> Optional[User]:
    """Write only the fields present in ``patch``; returns None for an unknown user."""
    values = patch.present_fields()
    if not values:
        raise NothingToUpdateError()

    user = db.get(User, user_id)
    if user is None:
        return None

    existing = find_conflicting_user(db, values.get("username"), values.get("email"), exclude_id=user_id)
    if existing:
        raise UserConflictError(existing=_identity(existing))

    for field in PATCHABLE_FIELDS:
        if field in values:
            setattr(user, field, values[field])

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise UserConflictError(detail=str(exc.orig)) from exc
    db.refresh(user)
    logger.info("Updated user %s fields: %s", user_id, ", ".join(values))
    return user
