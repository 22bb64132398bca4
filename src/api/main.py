"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance, registers the
domain error handler, and builds the collaborators routes read from
app.state during the lifespan.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from src.adapters.imaging.pillow import PillowImageProcessor
from src.adapters.repository.postgres import run_migrations
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.mailer import SmtpEmailSender
from src.api.errors import setup_exception_handlers
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings
from src.domain.ports import EmailSender
from src.domain.tokens import SigningKey, TokenService

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account API v1 - Register, activate, log in, reset passwords and manage profiles",
    },
]


def build_email_sender(settings: Settings) -> EmailSender:
    """Select the email backend named in settings."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(settings)
    return ConsoleEmailSender()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def open_pool(settings: Settings) -> ConnectionPool:
    """Open the connection pool and bring the schema up to date."""
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )
    run_migrations(pool)
    return pool


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Startup builds every collaborator the routes read from app.state.
    A missing signing key aborts startup before the pool is opened.
    """
    settings = get_settings()
    configure_logging(settings)

    app.state.token_service = TokenService(SigningKey(settings.secret_key.get_secret_value()))
    app.state.email_sender = build_email_sender(settings)
    app.state.image_processor = PillowImageProcessor(size=settings.thumbnail_size)
    logger.info("Email backend: %s", settings.email_backend)

    app.state.pool = open_pool(settings)
    logger.info("Account service ready")

    yield

    app.state.pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="accounts",
    description="Account API - Registration, email-gated activation and signed session tokens",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

setup_exception_handlers(app)
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> JSONResponse:
    """Report 200 when the database answers, 503 otherwise."""
    try:
        with request.app.state.pool.connection() as conn:
            conn.execute("SELECT 1")
    except psycopg.Error as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unhealthy"})
    return JSONResponse(content={"status": "healthy"})
