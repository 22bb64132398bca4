"""
Unit tests for domain ports and exceptions.

Tests verify:
- Port interfaces are properly defined
- Exceptions are properly structured
- Domain purity (zero framework imports)
"""

import json
import subprocess
from enum import Enum

import pytest

from src.domain.exceptions import (
    AccountError,
    CodeNotFound,
    ConfigurationError,
    EmailConflict,
    ErrorCode,
    InternalFailure,
    InvalidCredentials,
    RepositoryError,
    Unauthenticated,
    WeakPassword,
)
from src.domain.ports import AccountRepository, EmailSender, ImageProcessor


class TestErrorCodeEnum:
    """Tests for ErrorCode enum."""

    def test_error_code_is_str_enum(self) -> None:
        """ErrorCode uses str mixin for JSON serialization."""
        assert issubclass(ErrorCode, Enum)
        assert issubclass(ErrorCode, str)
        assert json.dumps(ErrorCode.EMAIL_CONFLICT) == '"EMAIL_CONFLICT"'

    def test_error_code_string_comparison(self) -> None:
        assert ErrorCode.UNAUTHENTICATED == "UNAUTHENTICATED"


class TestAccountRepositoryProtocol:
    """Tests for AccountRepository protocol."""

    @pytest.mark.parametrize(
        "method",
        [
            "create",
            "get_by_id",
            "get_by_email",
            "get_by_registration_code",
            "get_by_reset_code",
            "update",
            "consume_code",
            "delete",
        ],
    )
    def test_defines_method(self, method: str) -> None:
        assert hasattr(AccountRepository, method)

    def test_in_memory_fake_satisfies_protocol(self, repository) -> None:
        """The test fake is structurally an AccountRepository."""

        def accepts_repository(r: AccountRepository) -> None:
            pass

        accepts_repository(repository)


class TestEmailSenderProtocol:
    """Tests for EmailSender protocol."""

    def test_defines_methods(self) -> None:
        assert hasattr(EmailSender, "send_registration_code")
        assert hasattr(EmailSender, "send_reset_code")


class TestImageProcessorProtocol:
    """Tests for ImageProcessor protocol."""

    def test_defines_make_thumbnail(self) -> None:
        assert hasattr(ImageProcessor, "make_thumbnail")


class TestDomainExceptions:
    """Tests for domain exceptions."""

    def test_account_error_is_exception(self) -> None:
        assert issubclass(AccountError, Exception)

    @pytest.mark.parametrize(
        "exc_type", [EmailConflict, CodeNotFound, InvalidCredentials, Unauthenticated, WeakPassword]
    )
    def test_failures_inherit_account_error(self, exc_type: type[AccountError]) -> None:
        assert issubclass(exc_type, AccountError)

    def test_storage_and_config_errors_are_internal(self) -> None:
        """RepositoryError and ConfigurationError are internal failures."""
        assert issubclass(RepositoryError, InternalFailure)
        assert issubclass(ConfigurationError, InternalFailure)

    def test_default_message(self) -> None:
        exc = EmailConflict()
        assert exc.message == "A user with this email address already exists"
        assert exc.code is ErrorCode.EMAIL_CONFLICT
        assert str(exc) == exc.message

    def test_message_override(self) -> None:
        exc = CodeNotFound("A user with this reset code could not be found")
        assert exc.message == "A user with this reset code could not be found"
        assert exc.code is ErrorCode.CODE_NOT_FOUND


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
            "from PIL",
            "import smtplib",
        ],
    )
    def test_no_infrastructure_imports_in_domain(self, pattern: str) -> None:
        """Domain layer has no web, storage, imaging, or mail imports."""
        result = subprocess.run(
            ["grep", "-r", pattern, "src/domain/"],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Import found: {result.stdout}"
