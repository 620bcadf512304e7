"""
API v1 routes.

Defines REST endpoints for the account lifecycle API:
- POST /v1/register      - Create a PENDING account and email a verification link
- GET  /v1/verify-email  - Redeem the emailed token (HTML result page)
- POST /v1/login         - Authenticate a VERIFIED account

Routes are plain (sync) functions: the domain services make blocking
bcrypt, database and HTTP calls, so FastAPI runs them in its threadpool.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from src.api.dependencies import (
    get_login_gate,
    get_registration_coordinator,
    get_verification_base_link,
    get_verification_handler,
)
from src.api.models import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from src.api.pages import verification_failure_page, verification_success_page
from src.domain.exceptions import (
    AuthenticationFailed,
    DuplicateAccount,
    EmailNotVerified,
    MissingCredentials,
    ProviderFailure,
    TokenInvalid,
)
from src.domain.login import LoginGate
from src.domain.registration import ProfileFields, RegistrationCoordinator
from src.domain.verification import VerificationHandler

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Internal error"},
        422: {"description": "Validation error"},
    },
    summary="Register a new user",
    description="Submit email and password to create an account pending verification. "
    "A verification link valid for 24 hours is sent to the provided email.",
)
def register(
    request_data: RegisterRequest,
    base_link: str = Depends(get_verification_base_link),
    coordinator: RegistrationCoordinator = Depends(get_registration_coordinator),
) -> RegisterResponse:
    """
    Register a new user and send the verification link.

    - **email**: Valid email address to register
    - **password**: Password (minimum 6 characters)
    - **username**, **phone**, **display_name**: Optional profile fields
    """
    profile = ProfileFields(
        username=request_data.username,
        phone=request_data.phone,
        display_name=request_data.display_name,
    )
    try:
        receipt = coordinator.register(
            request_data.email, request_data.password, profile, base_link=base_link
        )
    except MissingCredentials as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except DuplicateAccount:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with that email already exists",
        ) from None
    except ProviderFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed",
        ) from None
    return RegisterResponse(message=receipt.message, email=receipt.email)


@router.get(
    "/verify-email",
    name="verify_email",
    response_class=HTMLResponse,
    responses={400: {"description": "Missing, invalid or expired token"}},
    summary="Verify email address",
    description="Opened from the emailed link. Marks the account verified "
    "and returns a human-readable result page.",
)
def verify_email(
    token: str | None = None,
    handler: VerificationHandler = Depends(get_verification_handler),
) -> HTMLResponse:
    """Redeem a verification token."""
    if not token:
        return HTMLResponse(
            verification_failure_page("Verification token is required."),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    try:
        handler.verify(token)
    except TokenInvalid:
        return HTMLResponse(
            verification_failure_page(
                "Invalid or expired verification token. Please request a new verification email."
            ),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except ProviderFailure:
        return HTMLResponse(
            verification_failure_page("Something went wrong. Please try again later."),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return HTMLResponse(verification_success_page())


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
        500: {"model": ErrorResponse, "description": "Internal error"},
        422: {"description": "Validation error"},
    },
    summary="Log in with email and password",
    description="Authenticates a verified account and returns the provider session token.",
)
def login(
    request_data: LoginRequest,
    gate: LoginGate = Depends(get_login_gate),
) -> LoginResponse:
    """Log in a verified account."""
    try:
        result = gate.login(request_data.email, request_data.password)
    except MissingCredentials as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from None
    except AuthenticationFailed as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e)) from None
    except EmailNotVerified as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from None
    except ProviderFailure:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication failed",
        ) from None
    return LoginResponse(
        account_id=result.account_id,
        identity_ref=result.identity_ref,
        email=result.email,
        display_name=result.display_name,
        username=result.username,
        session_token=result.session_token,
    )
