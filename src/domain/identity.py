"""
Identity resolution - turn a request's credential carriers into an account.

Two carriers are accepted: a cookie named ``token`` and an
``Authorization: Bearer <token>`` header. A well-formed header wins over
the cookie; a header with any other shape is ignored and the cookie is
used instead.

Resolution is read-only and yields a typed outcome:

    ABSENT    no carrier was present (not an authentication attempt)
    INVALID   a token was presented but did not resolve to an account
    RESOLVED  the token is valid and its subject exists
"""

from dataclasses import dataclass
from enum import Enum

from .account import Account
from .ports import AccountRepository
from .tokens import TokenService

TOKEN_COOKIE = "token"
BEARER_SCHEME = "bearer"


class IdentityStatus(Enum):
    """Outcome of resolving a request's credentials."""

    ABSENT = "absent"
    INVALID = "invalid"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class Identity:
    """Resolution result; account is set only when status is RESOLVED."""

    status: IdentityStatus
    account: Account | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.status is IdentityStatus.RESOLVED


ABSENT = Identity(IdentityStatus.ABSENT)
INVALID = Identity(IdentityStatus.INVALID)


def extract_token(cookie: str | None, authorization: str | None) -> str | None:
    """
    Pick the candidate token from the two carriers.

    The header is used only when it is exactly ``Bearer <token>`` (scheme
    compared case-insensitively).
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == BEARER_SCHEME:
            return parts[1]
    if cookie:
        return cookie
    return None


class IdentityResolver:
    """Resolves credential carriers against the token service and repository."""

    def __init__(self, token_service: TokenService, repository: AccountRepository) -> None:
        self._tokens = token_service
        self._repository = repository

    def resolve(self, cookie: str | None, authorization: str | None) -> Identity:
        token = extract_token(cookie, authorization)
        if token is None:
            return ABSENT

        subject = self._tokens.verify(token)
        if subject is None:
            return INVALID

        # str.isdigit accepts non-ASCII digits that int() may reject
        if not (subject.isascii() and subject.isdigit()):
            return INVALID

        account = self._repository.get_by_id(int(subject))
        if account is None:
            return INVALID

        return Identity(IdentityStatus.RESOLVED, account)
