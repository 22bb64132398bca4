"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A signing secret in the environment so Settings() can load
- An in-memory AccountRepository fake
- A recording EmailSender fake
- A wired AccountService
- A PostgreSQL connection pool for integration and adversarial tests
"""

import os
from dataclasses import replace
from itertools import count

import psycopg
import pytest
from psycopg_pool import ConnectionPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-bytes-long")

from src.adapters.repository.postgres import run_migrations  # noqa: E402
from src.config.settings import get_settings  # noqa: E402
from src.domain.account import Account  # noqa: E402
from src.domain.accounts import AccountService  # noqa: E402
from src.domain.exceptions import EmailConflict  # noqa: E402
from src.domain.tokens import SigningKey, TokenService  # noqa: E402

TEST_SECRET = "test-secret-key-that-is-at-least-32-bytes-long"


class InMemoryAccountRepository:
    """
    Dict-backed AccountRepository for unit tests.

    Stores copies so that callers mutating a returned Account do not
    change stored state until they call update(), like a real database.
    """

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self._ids = count(1)
        self.fail_updates = False

    def create(self, account: Account) -> Account:
        if self._find(lambda a: a.email == account.email) is not None:
            raise EmailConflict()
        stored = replace(account, id=next(self._ids))
        self.accounts[stored.id] = stored
        return replace(stored)

    def get_by_id(self, account_id: int) -> Account | None:
        stored = self.accounts.get(account_id)
        return replace(stored) if stored is not None else None

    def get_by_email(self, email: str) -> Account | None:
        return self._find(lambda a: a.email == email)

    def get_by_registration_code(self, code: str) -> Account | None:
        return self._find(lambda a: a.registration_code is not None and a.registration_code == code)

    def get_by_reset_code(self, code: str) -> Account | None:
        return self._find(lambda a: a.reset_code is not None and a.reset_code == code)

    def update(self, account: Account) -> bool:
        if self.fail_updates or account.id not in self.accounts:
            return False
        clash = self._find(lambda a: a.email == account.email and a.id != account.id)
        if clash is not None:
            raise EmailConflict()
        self.accounts[account.id] = replace(account)
        return True

    def consume_code(self, account: Account, column: str, code: str) -> bool:
        stored = self.accounts.get(account.id)
        if stored is None or getattr(stored, column) != code:
            return False
        return self.update(account)

    def delete(self, account_id: int) -> bool:
        return self.accounts.pop(account_id, None) is not None

    def stored(self, account_id: int) -> Account:
        """Direct access to the stored record (test helper)."""
        return self.accounts[account_id]

    def _find(self, predicate) -> Account | None:
        for stored in sorted(self.accounts.values(), key=lambda a: a.id):
            if predicate(stored):
                return replace(stored)
        return None


class RecordingEmailSender:
    """EmailSender fake that records every message."""

    def __init__(self) -> None:
        self.registration_codes: list[tuple[str, str]] = []
        self.reset_codes: list[tuple[str, str, str]] = []

    def send_registration_code(self, email: str, code: str) -> None:
        self.registration_codes.append((email, code))

    def send_reset_code(self, email: str, code: str, display_name: str) -> None:
        self.reset_codes.append((email, code, display_name))


class StubImageProcessor:
    """ImageProcessor fake returning fixed thumbnail bytes."""

    THUMBNAIL = b"\xff\xd8\xff\xe0thumbnail"

    def make_thumbnail(self, data: bytes) -> bytes:
        return self.THUMBNAIL


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(SigningKey(TEST_SECRET))


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def image_processor() -> StubImageProcessor:
    return StubImageProcessor()


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    email_sender: RecordingEmailSender,
    token_service: TokenService,
    image_processor: StubImageProcessor,
) -> AccountService:
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        token_service=token_service,
        image_processor=image_processor,
    )


@pytest.fixture(scope="session")
def pool():
    """
    Connection pool against DATABASE_URL with migrations applied.

    Tests that need PostgreSQL are skipped when it is not reachable.
    """
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3):
            pass
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")

    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    run_migrations(pool)
    yield pool
    pool.close()
