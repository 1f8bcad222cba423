"""
Error responses for the insight API.

Every error leaves the service as ``{"detail", "error_code", "path"}``:
- ``APIError`` subclasses carry their own status and code (unknown menu
  item, missing or invalid token, wrong role)
- ``ValueError`` raised by the services for out-of-range query values
  (e.g. an analytics window longer than the configured maximum) maps to 400
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """HTTP error with a machine-readable error code"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIError):
    """Requested menu item (or other entity) does not exist"""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail, "NOT_FOUND")


class AuthenticationError(APIError):
    """Bearer token missing, malformed or expired"""

    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED,
            detail,
            "AUTH_FAILED",
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(APIError):
    """Caller's role may not read this view"""

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, "PERMISSION_DENIED")


def error_body(request: Request, detail: Any, error_code: str) -> Dict[str, Any]:
    return {"detail": detail, "error_code": error_code, "path": request.url.path}


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    logger.info(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.detail, exc.error_code),
        headers=exc.headers,
    )


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning(f"Invalid parameter at {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(request, str(exc), "INVALID_PARAMETER"),
    )


def register_exception_handlers(app):
    """Register the insight API's error handlers on ``app``"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(ValueError, handle_value_error)
