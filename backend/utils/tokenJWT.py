# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from config import settings
from schemas.user import CurrentUser
from utils.errors import AuthenticationFailed, Forbidden

# Authorization scheme; missing headers are reported by get_current_user itself
bearer_scheme = HTTPBearer(auto_error=False)

# Sign an identity claim (id, email, username) for the given user
def create_access_token(user, expires_delta: timedelta = None) -> str:
    to_encode = {"id": user.id, "email": user.email, "username": user.username}
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Verify signature and expiry, raises JWTError on failure
def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])

# Resolve the bearer token to the caller's identity
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Access token required")

    try:
        payload = decode_access_token(credentials.credentials)
        return CurrentUser(id=payload["id"], email=payload["email"], username=payload["username"])
    except (JWTError, KeyError, ValueError):
        raise Forbidden("Invalid or expired token")
