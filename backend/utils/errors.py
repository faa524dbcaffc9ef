# backend/utils/errors.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base error rendered as ``{"success": false, "error": ..., "message": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_error: str = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(
        self,
        error: Optional[str] = None,
        message: Optional[str] = None,
        debug: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.error = error or self.default_error
        self.message = message or self.error
        self.debug = debug
        self.extra = extra or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.error)

    def to_response(self) -> Dict[str, Any]:
        body = {"success": False, "error": self.error, "message": self.message}
        if self.debug:
            body["debug"] = self.debug
        body.update(self.extra)
        return body


class ValidationFailed(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_error = "Invalid request"


class Conflict(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_error = "Resource already exists"


class AuthenticationFailed(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_error = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_error = "Forbidden"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_error = "Not found"


def server_error(error: str, exc: Exception) -> APIError:
    # Generic 500 carrying the raw failure text for diagnostics
    return APIError(error=error, debug=str(exc))


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ()) if loc != "body")
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def setup_error_handlers(app: FastAPI):
    """Install the JSON error envelope on every failure path."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.error, exc.debug)
        else:
            logger.warning("%s %s rejected with %s: %s", request.method, request.url.path, exc.status_code, exc.error)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "error": "Missing or invalid fields",
                "message": message,
                "details": [
                    {"field": ".".join(str(loc) for loc in err.get("loc", ())), "message": err.get("msg")}
                    for err in exc.errors()
                ],
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail), "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal server error",
                "message": str(exc),
                "type": type(exc).__name__,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
