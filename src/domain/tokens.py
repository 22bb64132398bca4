"""
Session tokens - compact HS256 JWTs carrying only the account id.

Tokens carry no expiry claim; rotating the signing key is the only way to
invalidate every outstanding session at once.
"""

from dataclasses import dataclass

import jwt

from .exceptions import ConfigurationError, InternalFailure

ALGORITHM = "HS256"


@dataclass(frozen=True)
class SigningKey:
    """Process-wide signing secret, built once at startup."""

    secret: str = ""

    def __post_init__(self) -> None:
        if not self.secret:
            raise ConfigurationError("Secret key for token signing is missing")

    def __repr__(self) -> str:
        return "SigningKey(secret=***)"


class TokenService:
    """Signs and verifies session tokens with a fixed SigningKey."""

    def __init__(self, key: SigningKey) -> None:
        self._key = key

    def sign(self, account_id: int) -> str:
        """
        Mint a token whose only claim is sub=str(account_id).

        Raises:
            InternalFailure: If the token could not be encoded
        """
        try:
            return jwt.encode({"sub": str(account_id)}, self._key.secret, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise InternalFailure("Token could not be created") from e

    def verify(self, token: str) -> str | None:
        """
        Check a token's signature and return its subject.

        Returns None for malformed, truncated, tampered, or foreign tokens;
        never raises.
        """
        if not isinstance(token, str) or not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self._key.secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub"]},
            )
        except (jwt.PyJWTError, ValueError, TypeError):
            return None
        subject = claims.get("sub")
        if not isinstance(subject, str):
            return None
        return subject
