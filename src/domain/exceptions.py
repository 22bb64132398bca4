"""
Domain exceptions - Semantic error types for the account lifecycle.

Every error carries a machine-readable ErrorCode and a message that is
safe to show to the caller. The API layer maps codes to HTTP statuses
in one place (src.api.errors).
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable machine codes for account errors."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    EMAIL_CONFLICT = "EMAIL_CONFLICT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    CODE_NOT_FOUND = "CODE_NOT_FOUND"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    ALREADY_ACTIVE = "ALREADY_ACTIVE"
    UNSUPPORTED_IMAGE = "UNSUPPORTED_IMAGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AccountError(Exception):
    """Base class for account domain errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    default_message: str = "Account error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(AccountError):
    """Malformed or missing input."""

    code = ErrorCode.VALIDATION_ERROR
    default_message = "Invalid input"


class WeakPassword(AccountError):
    """Candidate password is shorter than the minimum length."""

    code = ErrorCode.WEAK_PASSWORD
    default_message = "Password is too short. Minimum 8 characters"


class PasswordMismatch(AccountError):
    """New password and its repetition differ."""

    code = ErrorCode.PASSWORD_MISMATCH
    default_message = "Passwords do not match"


class EmailConflict(AccountError):
    """Email is already used by another account."""

    code = ErrorCode.EMAIL_CONFLICT
    default_message = "A user with this email address already exists"


class Unauthenticated(AccountError):
    """No valid session accompanies a request that needs one."""

    code = ErrorCode.UNAUTHENTICATED
    default_message = "Not authorized"


class InvalidCredentials(AccountError):
    """Password (or old password) did not verify."""

    code = ErrorCode.INVALID_CREDENTIALS
    default_message = "User not found or wrong password"


class CodeNotFound(AccountError):
    """No account holds the submitted registration or reset code."""

    code = ErrorCode.CODE_NOT_FOUND
    default_message = "A user with this code could not be found"


class AccountNotFound(AccountError):
    """No account is registered under the given email."""

    code = ErrorCode.ACCOUNT_NOT_FOUND
    default_message = "User not found"


class AlreadyActive(AccountError):
    """Activation was requested for an account that is already active."""

    code = ErrorCode.ALREADY_ACTIVE
    default_message = "User already activated"


class UnsupportedImage(AccountError):
    """Uploaded bytes are not a supported raster image."""

    code = ErrorCode.UNSUPPORTED_IMAGE
    default_message = "Unrecognized file type"


class InternalFailure(AccountError):
    """Signing, hashing, persistence, or configuration failure."""

    code = ErrorCode.INTERNAL_ERROR
    default_message = "Internal server error"


class RepositoryError(InternalFailure):
    """Storage backend failed; wraps the driver exception."""


class ConfigurationError(InternalFailure):
    """Required configuration is missing or invalid at startup."""
