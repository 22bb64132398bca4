"""
Account lifecycle service - credential and session state machine.

States
======

- PENDING_ACTIVATION: registration_code is set (initial state after register)
- ACTIVE: registration_code is None
- RESET_PENDING: orthogonal sub-state while reset_code is set; may overlap
  either of the above

Transitions
===========

    register            -> PENDING_ACTIVATION (fresh registration code)
    activate(code)      PENDING_ACTIVATION -> ACTIVE, token issued
    resend_activation   PENDING_ACTIVATION -> PENDING_ACTIVATION (same code)
    login               any -> same activation state, reset_code cleared, token issued
    request_reset       any -> RESET_PENDING (fresh reset code)
    fulfill_reset       RESET_PENDING -> ACTIVE, both codes cleared, token issued

Activation is monotonic: nothing but register ever writes a registration
code. Each operation is a single read-modify-write of one account.
Token-issuing operations sign first and persist second; a failed persist
raises InternalFailure and the token is discarded.

Email notifications are best effort. A failing EmailSender is logged and
never fails or rolls back the operation that triggered it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .account import Account
from .codes import generate_code, is_well_formed_code
from .exceptions import (
    AccountNotFound,
    AlreadyActive,
    CodeNotFound,
    EmailConflict,
    InternalFailure,
    InvalidCredentials,
    PasswordMismatch,
)
from .passwords import DUMMY_PASSWORD_HASH, check_password_strength, hash_password, verify_password
from .ports import AccountRepository, EmailSender, ImageProcessor
from .tokens import TokenService

logger = logging.getLogger(__name__)

CODE_GENERATION_ATTEMPTS = 5


@dataclass(frozen=True)
class SessionToken:
    """Signed session token issued by a successful credential event."""

    token: str


def normalize_email(email: str) -> str:
    """
    Normalize email address for consistent storage and lookup.

    Applies: strip whitespace + lowercase
    """
    return email.strip().lower()


@dataclass
class AccountService:
    """
    Domain service for the account lifecycle.

    Orchestrates password hashing, code generation, token signing,
    persistence, and notification for every account flow.
    """

    repository: AccountRepository
    email_sender: EmailSender
    token_service: TokenService
    image_processor: ImageProcessor

    # ------------------------------------------------------------------
    # Registration and activation
    # ------------------------------------------------------------------

    def register(self, email: str, password: str) -> Account:
        """
        Create a pending account and send its registration code.

        Args:
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            The persisted account, with its id assigned

        Raises:
            WeakPassword: If the password is shorter than 8 characters
            EmailConflict: If the email is already registered
        """
        normalized_email = normalize_email(email)
        check_password_strength(password)

        if self.repository.get_by_email(normalized_email) is not None:
            raise EmailConflict()

        account = Account(
            email=normalized_email,
            password_hash=hash_password(password),
            registration_code=self._fresh_code(self.repository.get_by_registration_code),
        )
        # create() raises EmailConflict itself if a concurrent register won
        created = self.repository.create(account)
        logger.info("Account %s registered for %s", created.id, created.email)

        self._notify(
            created.email, self.email_sender.send_registration_code, created.email, created.registration_code
        )
        return created

    def activate(self, code: str) -> SessionToken:
        """
        Consume a registration code and open a session.

        Raises:
            CodeNotFound: If no account holds the code, or a concurrent request spent it first
        """
        not_found = CodeNotFound("A user with this registration code could not be found")
        account = self.repository.get_by_registration_code(code) if is_well_formed_code(code) else None
        if account is None:
            raise not_found

        account.registration_code = None
        session = self._consume_with_token(account, "registration_code", code, not_found)
        logger.info("Account %s activated", account.id)
        return session

    def resend_activation(self, email: str) -> None:
        """
        Re-send the existing registration code to a pending account.

        Raises:
            AccountNotFound: If no account uses the email
            AlreadyActive: If the account has already been activated
        """
        account = self.repository.get_by_email(normalize_email(email))
        if account is None:
            raise AccountNotFound("User could not be found")
        if not account.is_pending_activation:
            raise AlreadyActive()

        self._notify(
            account.email, self.email_sender.send_registration_code, account.email, account.registration_code
        )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> SessionToken:
        """
        Verify credentials and open a session.

        Unknown emails are checked against a dummy hash so both failure
        paths cost one bcrypt verification and report the same error.

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong
        """
        account = self.repository.get_by_email(normalize_email(email))
        stored_hash = account.password_hash if account is not None else DUMMY_PASSWORD_HASH
        password_valid = verify_password(password, stored_hash)

        if account is None or not password_valid:
            logger.info("Login failed for %s", normalize_email(email))
            raise InvalidCredentials()

        # A successful login proves the user still knows the password
        account.reset_code = None
        session = self._persist_with_token(account)
        logger.info("Account %s logged in", account.id)
        return session

    def logout(self) -> None:
        """
        End a session.

        Tokens are not tracked server-side; the caller discards the cookie.
        Always succeeds.
        """
        return None

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    def request_reset(self, email: str) -> None:
        """
        Issue a fresh reset code and email it.

        Raises:
            AccountNotFound: If no account uses the email
        """
        account = self.repository.get_by_email(normalize_email(email))
        if account is None:
            raise AccountNotFound()

        account.reset_code = self._fresh_code(self.repository.get_by_reset_code)
        self._persist(account)
        logger.info("Password reset requested for account %s", account.id)

        self._notify(
            account.email,
            self.email_sender.send_reset_code,
            account.email,
            account.reset_code,
            account.display_name,
        )

    def fulfill_reset(self, code: str, new_password: str) -> SessionToken:
        """
        Consume a reset code, set a new password, and open a session.

        Fulfilling a reset also counts as activation.

        Raises:
            WeakPassword: If the new password is shorter than 8 characters
            CodeNotFound: If no account holds the reset code, or a concurrent request spent it first
        """
        check_password_strength(new_password)

        not_found = CodeNotFound("A user with this reset code could not be found")
        account = self.repository.get_by_reset_code(code) if is_well_formed_code(code) else None
        if account is None:
            raise not_found

        account.password_hash = hash_password(new_password)
        account.reset_code = None
        account.registration_code = None
        session = self._consume_with_token(account, "reset_code", code, not_found)
        logger.info("Password reset completed for account %s", account.id)
        return session

    # ------------------------------------------------------------------
    # Authenticated updates
    # ------------------------------------------------------------------

    def get_account(self, account: Account) -> Account:
        """Return the caller's own account."""
        return account

    def change_password(
        self, account: Account, old_password: str, new_password: str, repeat_password: str
    ) -> None:
        """
        Replace the caller's password after re-verifying the old one.

        Raises:
            PasswordMismatch: If new and repeat differ
            WeakPassword: If the new password is shorter than 8 characters
            InvalidCredentials: If the old password does not verify
        """
        if new_password != repeat_password:
            raise PasswordMismatch()
        check_password_strength(new_password)
        if not verify_password(old_password, account.password_hash):
            raise InvalidCredentials("Invalid password")

        account.password_hash = hash_password(new_password)
        self._persist(account)
        logger.info("Password changed for account %s", account.id)

    def change_email(self, account: Account, new_email: str, password: str) -> None:
        """
        Move the caller to a new email address.

        Raises:
            EmailConflict: If another account already uses the address
            InvalidCredentials: If the password does not verify
        """
        normalized_email = normalize_email(new_email)
        holder = self.repository.get_by_email(normalized_email)
        if holder is not None and holder.id != account.id:
            raise EmailConflict("A user with this email already exists. Could not update.")
        if not verify_password(password, account.password_hash):
            raise InvalidCredentials()

        if normalized_email == account.email:
            return

        account.email = normalized_email
        self._persist(account)
        logger.info("Email changed for account %s", account.id)

    def update_profile(self, account: Account, display_name: str) -> Account:
        """Apply the user-editable profile fields."""
        account.display_name = display_name
        self._persist(account)
        return account

    def upload_photo(self, account: Account, image_bytes: bytes) -> Account:
        """
        Store a thumbnail of the uploaded image as the profile photo.

        Raises:
            UnsupportedImage: If the bytes are not a supported raster image
        """
        account.profile_image = self.image_processor.make_thumbnail(image_bytes)
        self._persist(account)
        logger.info("Profile photo updated for account %s", account.id)
        return account

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _persist(self, account: Account) -> None:
        account.touch()
        if not self.repository.update(account):
            raise InternalFailure("Account could not be updated")

    def _persist_with_token(self, account: Account) -> SessionToken:
        token = self.token_service.sign(account.id)
        self._persist(account)
        return SessionToken(token=token)

    def _consume_with_token(
        self, account: Account, column: str, code: str, not_found: CodeNotFound
    ) -> SessionToken:
        """Persist only if the code is still unspent; a concurrent spender wins otherwise."""
        token = self.token_service.sign(account.id)
        account.touch()
        if not self.repository.consume_code(account, column, code):
            raise not_found
        return SessionToken(token=token)

    def _fresh_code(self, lookup: Callable[[str], Account | None]) -> str:
        """Generate a code no account currently holds, within a bounded retry."""
        for _ in range(CODE_GENERATION_ATTEMPTS):
            code = generate_code()
            if lookup(code) is None:
                return code
        raise InternalFailure("Could not generate a unique code")

    def _notify(self, email: str, send: Callable[..., None], *args: object) -> None:
        try:
            send(*args)
        except Exception:
            logger.warning("Email notification to %s failed", email, exc_info=True)
