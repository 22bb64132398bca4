"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Protocol

from .account import Account


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def create(self, account: Account) -> Account:
        """
        Insert a new account and return it with its assigned id.

        Raises:
            EmailConflict: If the email is already registered
            RepositoryError: On any other storage failure
        """
        ...

    def get_by_id(self, account_id: int) -> Account | None:
        """Return the account with the given id, or None."""
        ...

    def get_by_email(self, email: str) -> Account | None:
        """Return the account registered under the normalized email, or None."""
        ...

    def get_by_registration_code(self, code: str) -> Account | None:
        """Return the account holding the registration code, or None."""
        ...

    def get_by_reset_code(self, code: str) -> Account | None:
        """Return the account holding the reset code, or None."""
        ...

    def update(self, account: Account) -> bool:
        """
        Persist every mutable field of an existing account.

        Returns:
            True if a row was written, False if the account no longer exists

        Raises:
            EmailConflict: If the new email collides with another account
            RepositoryError: On any other storage failure
        """
        ...

    def consume_code(self, account: Account, column: str, code: str) -> bool:
        """
        Persist the account like update(), but only while `column` still holds `code`.

        column is "registration_code" or "reset_code". Of several requests
        racing to spend the same code, exactly one gets True.

        Returns:
            True if the row was written, False if the code was already spent

        Raises:
            EmailConflict: If the new email collides with another account
            RepositoryError: On any other storage failure
        """
        ...

    def delete(self, account_id: int) -> bool:
        """Remove an account. Administrative only; no flow calls it."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_registration_code(self, email: str, code: str) -> None:
        """
        Send the activation code to a freshly registered address.

        Args:
            email: Recipient email address
            code: 8-character registration code
        """
        ...

    def send_reset_code(self, email: str, code: str, display_name: str) -> None:
        """
        Send a password reset code.

        Args:
            email: Recipient email address
            code: 8-character reset code
            display_name: Name used in the greeting (may be empty)
        """
        ...


class ImageProcessor(Protocol):
    """Port interface for profile photo thumbnailing."""

    def make_thumbnail(self, data: bytes) -> bytes:
        """
        Decode a raster image and return a JPEG thumbnail.

        Raises:
            UnsupportedImage: If the bytes are not a supported image
        """
        ...
