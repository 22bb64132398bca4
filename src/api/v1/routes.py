"""
API v1 routes.

Defines REST endpoints for the account lifecycle under /v1/user.
Domain errors propagate to the central handler in src.api.errors.

Handlers are plain functions so FastAPI runs them in its threadpool;
bcrypt work does not block the event loop.
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from src.api.dependencies import get_account_service, get_app_settings, require_account
from src.api.models import (
    AccountEnvelope,
    AccountResponse,
    ChangeEmailRequest,
    ChangePasswordRequest,
    EmailRequest,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenData,
    TokenResponse,
    UpdateProfileRequest,
)
from src.config.settings import Settings
from src.domain.account import Account
from src.domain.accounts import AccountService, SessionToken
from src.domain.exceptions import ValidationFailed
from src.domain.identity import TOKEN_COOKIE

router = APIRouter(prefix="/user", tags=["v1"])

UNAUTHORIZED = {401: {"model": ErrorResponse, "description": "Not authorized"}}


def set_session_cookie(response: Response, session: SessionToken, settings: Settings) -> None:
    """Attach the session token as an HttpOnly cookie."""
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=session.token,
        path="/",
        max_age=settings.cookie_max_age_seconds,
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=TOKEN_COOKIE,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def token_response(
    message: str, session: SessionToken, response: Response, settings: Settings
) -> TokenResponse:
    set_session_cookie(response, session, settings)
    return TokenResponse(message=message, data=TokenData(token=session.token))


# ----------------------------------------------------------------------
# Registration and activation
# ----------------------------------------------------------------------


@router.post(
    "",
    response_model=AccountEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"description": "Validation error"},
    },
    summary="Register a new user",
    description="Submit email and password to create an account. "
    "A registration code will be sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> AccountEnvelope:
    """
    Register a new user and send the registration code.

    - **email**: Valid email address to register
    - **password**: Password (minimum 8 characters)
    """
    account = service.register(request_data.email, request_data.password)
    return AccountEnvelope(message="User created", data=AccountResponse.from_account(account))


@router.get(
    "/activate/{registration_code}",
    response_model=TokenResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown registration code"}},
    summary="Activate account with registration code",
)
def activate(
    registration_code: str,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> TokenResponse:
    """Consume the registration code from the activation email and open a session."""
    session = service.activate(registration_code)
    return token_response("User activated", session, response, settings)


@router.post(
    "/resend_activation",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown email"},
        409: {"model": ErrorResponse, "description": "Account already active"},
    },
    summary="Resend the activation email",
)
def resend_activation(
    request_data: EmailRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.resend_activation(request_data.email)
    return MessageResponse(message="Activation email resent")


# ----------------------------------------------------------------------
# Sessions
# ----------------------------------------------------------------------


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
    summary="Log in with email and password",
)
def login(
    request_data: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> TokenResponse:
    """
    Log in and receive a session token.

    The token is returned in the body and set as the ``token`` cookie.
    Unknown email and wrong password produce the same 401.
    """
    session = service.login(request_data.email, request_data.password)
    return token_response("Login successful", session, response, settings)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> MessageResponse:
    """Discard the session cookie. Idempotent."""
    service.logout()
    clear_session_cookie(response, settings)
    return MessageResponse(message="Logout successful")


# ----------------------------------------------------------------------
# Password reset
# ----------------------------------------------------------------------


@router.post(
    "/request_reset",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Unknown email"}},
    summary="Request a password reset code",
)
def request_reset(
    request_data: EmailRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.request_reset(request_data.email)
    return MessageResponse(message="Password reset email sent")


@router.post(
    "/reset_password",
    response_model=TokenResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown reset code"},
        422: {"model": ErrorResponse, "description": "Password too short"},
    },
    summary="Set a new password with a reset code",
)
def reset_password(
    request_data: ResetPasswordRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> TokenResponse:
    session = service.fulfill_reset(request_data.reset_code, request_data.password)
    return token_response("Password reset successful", session, response, settings)


# ----------------------------------------------------------------------
# Authenticated account management
# ----------------------------------------------------------------------


@router.get(
    "",
    response_model=AccountEnvelope,
    responses=UNAUTHORIZED,
    summary="Get the current user",
)
def current_user(
    account: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> AccountEnvelope:
    account = service.get_account(account)
    return AccountEnvelope(message="User found", data=AccountResponse.from_account(account))


@router.put(
    "",
    response_model=AccountEnvelope,
    responses=UNAUTHORIZED,
    summary="Update profile fields",
)
def update_profile(
    request_data: UpdateProfileRequest,
    account: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> AccountEnvelope:
    account = service.update_profile(account, request_data.display_name)
    return AccountEnvelope(message="User updated", data=AccountResponse.from_account(account))


@router.put(
    "/password",
    response_model=MessageResponse,
    responses={
        **UNAUTHORIZED,
        422: {"model": ErrorResponse, "description": "Passwords differ or are too short"},
    },
    summary="Change password",
)
def change_password(
    request_data: ChangePasswordRequest,
    account: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.change_password(
        account,
        request_data.oldpassword,
        request_data.newpassword,
        request_data.repeatpassword,
    )
    return MessageResponse(message="Password changed")


@router.put(
    "/email",
    response_model=MessageResponse,
    responses={
        **UNAUTHORIZED,
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
    summary="Change email address",
)
def change_email(
    request_data: ChangeEmailRequest,
    account: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    service.change_email(account, request_data.email, request_data.password)
    return MessageResponse(message="User updated")


@router.post(
    "/profile_image",
    response_model=AccountEnvelope,
    responses={
        **UNAUTHORIZED,
        415: {"model": ErrorResponse, "description": "Unrecognized file type"},
        422: {"model": ErrorResponse, "description": "File too large"},
    },
    summary="Upload a profile photo",
)
def upload_photo(
    file: UploadFile = File(..., description="Image file (JPEG, PNG, GIF, BMP, WebP, TIFF, ICO)"),
    account: Account = Depends(require_account),
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_app_settings),
) -> AccountEnvelope:
    """Store a 100x100-bounded JPEG thumbnail of the uploaded image."""
    data = file.file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise ValidationFailed(f"Image is too large. Maximum {settings.max_upload_bytes} bytes")
    account = service.upload_photo(account, data)
    return AccountEnvelope(
        message="Image uploaded successfully", data=AccountResponse.from_account(account)
    )
