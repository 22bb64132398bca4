"""
Shared fixtures for integration tests.

Integration tests run against a real PostgreSQL database (DATABASE_URL)
and are skipped when it is not reachable.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.adapters.imaging.pillow import PillowImageProcessor
from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.api.main import app
from src.domain.tokens import SigningKey, TokenService

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Clean accounts table before each test that uses the database."""
    if "pool" in request.fixturenames:
        pool = request.getfixturevalue("pool")
        with pool.connection() as conn:
            conn.execute("DELETE FROM accounts")
            conn.commit()
    yield


@pytest.fixture
def client(pool: ConnectionPool) -> TestClient:
    """
    Create test client wired to the test pool.

    The lifespan is not run; app state is populated here instead.
    """
    app.state.pool = pool
    app.state.token_service = TokenService(SigningKey(TEST_SECRET))
    app.state.email_sender = ConsoleEmailSender()
    app.state.image_processor = PillowImageProcessor(size=100)
    return TestClient(app)
