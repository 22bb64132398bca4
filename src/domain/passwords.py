"""
Password hashing - bcrypt with a fixed work factor.

The work factor is a module constant rather than a setting so that hashes
written by one deployment verify identically on every other.
"""

import bcrypt

from .exceptions import InternalFailure, ValidationFailed, WeakPassword

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with bcrypt.

    Raises:
        InternalFailure: If hashing fails for any reason
    """
    try:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()
    except (ValueError, TypeError, UnicodeError) as e:
        raise InternalFailure("Password could not be hashed") from e


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time password check.

    Mismatches and malformed digests both return False; never raises.
    """
    if not isinstance(password, str) or not isinstance(password_hash, str) or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError, UnicodeError):
        return False


def check_password_strength(password: str) -> None:
    """
    Enforce the password length bounds.

    Raises:
        WeakPassword: If the password has fewer than 8 characters
        ValidationFailed: If the password exceeds what bcrypt can hash or
            contains a NUL character, which bcrypt rejects
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword()
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationFailed("Password is too long. Maximum 72 bytes")
    if "\x00" in password:
        raise ValidationFailed("Password must not contain NUL characters")


# Verified against when an email is unknown so that login spends the same
# bcrypt time whether or not the account exists.
DUMMY_PASSWORD_HASH = bcrypt.hashpw(
    b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
).decode()
