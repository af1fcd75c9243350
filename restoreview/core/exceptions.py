"""
Global exception handling for the application.
Every failure leaves the API in the same shape: {"message": ..., "details": ...}.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_content(self) -> Dict[str, Any]:
        return {"message": self.message, "details": self.details}


class ValidationError(AppError):
    """Malformed or missing input."""
    def __init__(self, message: str = "Invalid request", details: str = ""):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class UnauthorizedError(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Authentication required", details: str = ""):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class ForbiddenError(AppError):
    """Role-hierarchy or protected-identity violation."""
    def __init__(self, message: str = "Access denied", details: str = ""):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: str = ""):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictError(AppError):
    """Duplicate entity (email, slug, vote)."""
    def __init__(self, message: str = "Conflict", details: str = ""):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class AccountBlockedError(AppError):
    """Credentials are valid but the account has been blocked by staff."""
    def __init__(self, blocked_reason: Optional[str]):
        super().__init__(
            "Account blocked",
            status.HTTP_403_FORBIDDEN,
            "Your account has been blocked by an administrator",
        )
        self.blocked_reason = blocked_reason or "No reason given"

    def to_content(self) -> Dict[str, Any]:
        content = super().to_content()
        content["blocked"] = True
        content["blocked_reason"] = self.blocked_reason
        return content


class InternalError(AppError):
    """Unclassified failure."""
    def __init__(self, message: str = "Internal server error", details: str = ""):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Application error", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "details": ""},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "details": problems},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unexpected error occurred", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Internal server error",
            "details": "An unexpected error occurred. Please try again later.",
        },
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)
