"""
exceptions.py — Domain Exceptions & HTTP Translation

Purpose:
- Define the error taxonomy raised by services, repositories and guards.
- Map each exception class to the HTTP status returned to the caller.
- Register FastAPI exception handlers (called once from main.py).

Services never raise HTTPException directly; the mapping lives here so the
auth and calendar layers stay testable without a request.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bcal.core.logging import get_logger

logger = get_logger(__name__)


class ApplicationException(Exception):
    """Base exception for all application-specific exceptions."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DatabaseException(ApplicationException):
    """Exception raised for database-related errors."""
    pass


class ValidationException(ApplicationException):
    """Malformed input or a violated field invariant."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedException(ApplicationException):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidTokenException(UnauthorizedException):
    """Token signature mismatch, malformed structure, or expiry."""

    def __init__(self, message: str = "Invalid token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ForbiddenException(ApplicationException):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class SessionRevokedException(ForbiddenException):
    """
    Refresh token is well-formed and signed but no longer the live one:
    the session was logged out, or the token was already rotated away.
    """
    pass


class NotFoundException(ApplicationException):
    """Exception raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} with id {identifier} not found"
        super().__init__(message, {"resource": resource, "identifier": identifier})


class DuplicateException(ApplicationException):
    """Exception raised when attempting to create a duplicate resource."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} already exists with {field}: {value}"
        super().__init__(message, {"resource": resource, "field": field, "value": value})


# -----------------------------------------------------------------------------
# HTTP Translation
# -----------------------------------------------------------------------------

def _error_body(message: Any, status_code: int) -> Dict[str, Any]:
    return {"message": message, "statusCode": status_code}


def _format_validation_errors(exc: RequestValidationError) -> List[str]:
    """
    Flatten pydantic errors into "<field> <reason>" strings.

    Example:
        [{"loc": ("body", "email"), "msg": "value is not a valid email address"}]
        → ["email: value is not a valid email address"]
    """
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = error.get("msg", "invalid value")
        # pydantic prefixes custom ValueError messages
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{field}: {msg}" if field else msg)
    return messages


async def application_exception_handler(request: Request, exc: ApplicationException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body("Internal server error", exc.status_code),
        )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.status_code))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation is a 400 here, not FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(_format_validation_errors(exc), status.HTTP_400_BAD_REQUEST),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
