"""
Unit tests for the centralized exception handler.
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.errors import ERROR_CODE_TO_STATUS, setup_exception_handlers, status_for
from src.domain.exceptions import (
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


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (ValidationFailed(), 422),
        (WeakPassword(), 422),
        (PasswordMismatch(), 422),
        (EmailConflict(), 409),
        (AlreadyActive(), 409),
        (Unauthenticated(), 401),
        (InvalidCredentials(), 401),
        (CodeNotFound(), 404),
        (AccountNotFound(), 404),
        (UnsupportedImage(), 415),
        (InternalFailure(), 500),
        (RepositoryError(), 500),
        (ConfigurationError(), 500),
    ],
)
def test_status_for(exc: AccountError, expected: int) -> None:
    """Every failure kind maps to its HTTP status."""
    assert status_for(exc) == expected


def test_every_error_code_is_mapped() -> None:
    assert set(ERROR_CODE_TO_STATUS) == set(ErrorCode)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/conflict")
    def conflict() -> None:
        raise EmailConflict()

    @app.get("/custom")
    def custom() -> None:
        raise AccountNotFound("User could not be found")

    @app.get("/unauthenticated")
    def unauthenticated() -> None:
        raise Unauthenticated()

    @app.get("/internal")
    def internal() -> None:
        raise RepositoryError("duplicate key on accounts_pkey at 10.0.0.5")

    return TestClient(app)


class TestHandler:
    """Tests for the JSON error body."""

    def test_body_shape(self, client: TestClient) -> None:
        response = client.get("/conflict")

        assert response.status_code == 409
        assert response.json() == {
            "detail": "A user with this email address already exists",
            "code": "EMAIL_CONFLICT",
        }

    def test_custom_message(self, client: TestClient) -> None:
        """A message passed at raise time replaces the default."""
        assert client.get("/custom").json()["detail"] == "User could not be found"

    def test_unauthenticated_challenge(self, client: TestClient) -> None:
        response = client.get("/unauthenticated")
        assert response.headers["www-authenticate"] == "Bearer"

    def test_internal_details_hidden(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Internal failures answer with a generic message and log the cause."""
        with caplog.at_level(logging.ERROR):
            response = client.get("/internal")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "code": "INTERNAL_ERROR"}
        assert "10.0.0.5" in caplog.text
