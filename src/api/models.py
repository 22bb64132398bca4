"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from base64 import b64encode
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from src.domain.account import Account

IMAGE_DATA_URI_PREFIX = "data:image/jpeg;base64,"

# PostgreSQL text cannot hold NUL, so it is refused before reaching storage
Text = Annotated[str, StringConstraints(pattern=r"^[^\x00]*$")]


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: Text = Field(..., min_length=8, description="User password (min 8 characters)")


class LoginRequest(BaseModel):
    """Request model for login."""

    email: Text = Field(..., min_length=1)
    password: Text


class EmailRequest(BaseModel):
    """Request model for flows keyed by an email address only."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request model for fulfilling a password reset."""

    reset_code: Text = Field(..., min_length=1, max_length=32)
    password: Text


class ChangePasswordRequest(BaseModel):
    """Request model for changing the password of the current user."""

    oldpassword: Text
    newpassword: Text
    repeatpassword: Text


class ChangeEmailRequest(BaseModel):
    """Request model for changing the email of the current user."""

    email: EmailStr
    password: Text


class UpdateProfileRequest(BaseModel):
    """Request model for editable profile fields."""

    display_name: Text = Field(..., max_length=255)


class AccountResponse(BaseModel):
    """Public representation of an account."""

    id: int
    email: str
    display_name: str
    is_confirmed: bool
    image: str | None = Field(None, description="JPEG thumbnail as a base64 data URI")

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        image = None
        if account.profile_image is not None:
            image = IMAGE_DATA_URI_PREFIX + b64encode(account.profile_image).decode()
        return cls(
            id=account.id,
            email=account.email,
            display_name=account.display_name,
            is_confirmed=account.is_confirmed,
            image=image,
        )


class AccountEnvelope(BaseModel):
    """Response wrapping an account representation."""

    message: str
    data: AccountResponse


class TokenData(BaseModel):
    token: str


class TokenResponse(BaseModel):
    """Response for flows that open a session."""

    message: str
    data: TokenData


class MessageResponse(BaseModel):
    """Status-only response."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    code: str
