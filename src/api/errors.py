"""
Centralized exception handling for the FastAPI application.

Domain exceptions are mapped to HTTP responses in one place:

    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }

Internal failures are logged with their cause and answered with a generic
message so driver or library details never reach the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.exceptions import AccountError, ErrorCode, InternalFailure

logger = logging.getLogger(__name__)

ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.WEAK_PASSWORD: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.PASSWORD_MISMATCH: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.EMAIL_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_ACTIVE: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.CODE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNSUPPORTED_IMAGE: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_for(exc: AccountError) -> int:
    """HTTP status for a domain exception; unknown codes are server errors."""
    return ERROR_CODE_TO_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = status_for(exc)
    message = exc.message

    if isinstance(exc, InternalFailure) or status_code >= 500:
        logger.error(
            "Internal failure on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        message = INTERNAL_ERROR_MESSAGE

    headers = {"WWW-Authenticate": "Bearer"} if exc.code is ErrorCode.UNAUTHENTICATED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": message, "code": exc.code.value},
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain exception handler on the application."""
    app.add_exception_handler(AccountError, account_error_handler)
