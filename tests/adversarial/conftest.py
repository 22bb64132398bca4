"""
Shared fixtures for adversarial tests.

Adversarial tests run the account service against a real PostgreSQL
database (DATABASE_URL) and are skipped when it is not reachable.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.domain.account import Account
from src.domain.passwords import hash_password


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean accounts table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM accounts")
        conn.commit()
    yield


@pytest.fixture
def create_account(repository: PostgresAccountRepository):
    """Factory inserting an account with a real bcrypt hash."""

    def factory(
        email: str,
        password: str,
        registration_code: str | None = None,
        reset_code: str | None = None,
    ) -> Account:
        return repository.create(
            Account(
                email=email,
                password_hash=hash_password(password),
                registration_code=registration_code,
                reset_code=reset_code,
            )
        )

    return factory
