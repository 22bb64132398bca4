"""
Account entity - the single aggregate of the lifecycle engine.

An account is pending activation while it holds a registration code and
active once the code has been cleared. A reset code, when present, grants
exactly one password change.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class Account:
    """
    A user account record.

    password_hash and profile_image are excluded from repr so they never
    end up in log lines or tracebacks.
    """

    email: str
    password_hash: str = field(repr=False)
    id: int | None = None
    display_name: str = ""
    registration_code: str | None = field(default=None, repr=False)
    reset_code: str | None = field(default=None, repr=False)
    profile_image: bytes | None = field(default=None, repr=False)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_confirmed(self) -> bool:
        """True once the registration code has been consumed."""
        return self.registration_code is None

    @property
    def is_pending_activation(self) -> bool:
        return self.registration_code is not None

    def touch(self) -> None:
        """Stamp updated_at for a mutation."""
        self.updated_at = utcnow()
