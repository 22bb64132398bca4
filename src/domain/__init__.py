"""
Domain layer - Pure business logic with zero framework imports.

This package contains the account credential and session state machine.
It defines its own port interfaces for infrastructure abstraction,
ensuring true hexagonal architecture decoupling.
"""

from .account import Account
from .accounts import AccountService, SessionToken
from .exceptions import (
    AccountError,
    AccountNotFound,
    AlreadyActive,
    CodeNotFound,
    ConfigurationError,
    EmailConflict,
    ErrorCode,
    InternalFailure,
    InvalidCredentials,
    PasswordMismatch,
    RepositoryError,
    Unauthenticated,
    UnsupportedImage,
    ValidationFailed,
    WeakPassword,
)
from .identity import Identity, IdentityResolver, IdentityStatus
from .ports import AccountRepository, EmailSender, ImageProcessor
from .tokens import SigningKey, TokenService

__all__ = [
    "Account",
    "AccountError",
    "AccountNotFound",
    "AccountRepository",
    "AccountService",
    "AlreadyActive",
    "CodeNotFound",
    "ConfigurationError",
    "EmailConflict",
    "EmailSender",
    "ErrorCode",
    "Identity",
    "IdentityResolver",
    "IdentityStatus",
    "ImageProcessor",
    "InternalFailure",
    "InvalidCredentials",
    "PasswordMismatch",
    "RepositoryError",
    "SessionToken",
    "SigningKey",
    "TokenService",
    "Unauthenticated",
    "UnsupportedImage",
    "ValidationFailed",
    "WeakPassword",
]
