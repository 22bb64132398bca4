"""One-time registration and reset codes."""

import secrets
import string

CODE_LENGTH = 8
CODE_ALPHABET = string.ascii_letters + string.digits
MAX_CODE_LENGTH = 32  # width of the code columns


def generate_code(length: int = CODE_LENGTH) -> str:
    """
    Generate a cryptographically random alphanumeric code.

    Uses secrets for cryptographic randomness. Codes are not checked for
    uniqueness here; the account service retries on collision.
    """
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def is_well_formed_code(code: str) -> bool:
    """
    Check that a submitted code could have been issued.

    Anything else cannot match a stored code and is not sent to storage.
    """
    return 0 < len(code) <= MAX_CODE_LENGTH and all(c in CODE_ALPHABET for c in code)
