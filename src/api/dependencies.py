"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services, infrastructure adapters, and the resolved
caller identity into routes.
"""

from fastapi import Cookie, Depends, Header, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.config.settings import Settings, get_settings
from src.domain.account import Account
from src.domain.accounts import AccountService
from src.domain.exceptions import Unauthenticated
from src.domain.identity import Identity, IdentityResolver
from src.domain.ports import AccountRepository, EmailSender, ImageProcessor
from src.domain.tokens import TokenService


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_token_service(request: Request) -> TokenService:
    """Get the token service built from the signing key at startup."""
    return request.app.state.token_service


def get_email_sender(request: Request) -> EmailSender:
    """Get the configured email sender (singleton on app state)."""
    return request.app.state.email_sender


def get_image_processor(request: Request) -> ImageProcessor:
    """Get the profile photo processor (singleton on app state)."""
    return request.app.state.image_processor


def get_account_service(
    repository: AccountRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    token_service: TokenService = Depends(get_token_service),
    image_processor: ImageProcessor = Depends(get_image_processor),
) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together repository, email sender, token service, and image
    processor for the domain service. FastAPI caches each dependency per
    request, so the service and the identity resolver share one repository.
    """
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        token_service=token_service,
        image_processor=image_processor,
    )


def get_app_settings() -> Settings:
    """Get application settings (overridable in tests)."""
    return get_settings()


def get_identity(
    request: Request,
    token: str | None = Cookie(default=None, include_in_schema=False),
    authorization: str | None = Header(default=None, include_in_schema=False),
    token_service: TokenService = Depends(get_token_service),
    repository: AccountRepository = Depends(get_repository),
) -> Identity:
    """
    Resolve the caller's identity from the token cookie or bearer header.

    The result is cached on request.state so repeated use within one
    request does not re-verify the token or re-query the account.
    """
    cached = getattr(request.state, "identity", None)
    if cached is not None:
        return cached

    resolver = IdentityResolver(token_service, repository)
    identity = resolver.resolve(cookie=token, authorization=authorization)
    request.state.identity = identity
    return identity


def require_account(identity: Identity = Depends(get_identity)) -> Account:
    """
    Return the authenticated account or fail with 401.

    Both an absent and an invalid credential produce Unauthenticated.
    """
    if not identity.is_authenticated:
        raise Unauthenticated()
    return identity.account
