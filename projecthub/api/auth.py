"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from projecthub.api.dependencies import get_auth_service, get_current_user
from projecthub.models.user import User
from projecthub.schemas.auth import (
    AuthResponse,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    OtpSentResponse,
    SendOtpRequest,
    SignupRequest,
    UserResponse,
    VerifyOtpRequest,
)
from projecthub.services.auth import AuthResult, AuthService
from projecthub.services.errors import (
    AlreadyRegisteredError,
    AuthError,
    ConflictError,
    DeliveryFailedError,
    InternalError,
    InvalidCredentialError,
    InvalidInputError,
    OtpError,
    UnauthorizedError,
)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

# Bodies that fail schema validation get the route's own 400 message
VALIDATION_MESSAGES: dict[str, str] = {
    f"{router.prefix}/send-otp": "Invalid email",
    f"{router.prefix}/verify-otp": "Email and OTP required",
    f"{router.prefix}/signup": "Invalid signup data",
    f"{router.prefix}/login": "Email and password required",
    f"{router.prefix}/google": "Missing Google credential",
}

ERROR_STATUS: dict[type[AuthError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    AlreadyRegisteredError: status.HTTP_400_BAD_REQUEST,
    OtpError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidCredentialError: status.HTTP_401_UNAUTHORIZED,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    DeliveryFailedError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: AuthError) -> HTTPException:
    """Convert an auth service error into the matching HTTP error."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            status_code = ERROR_STATUS[cls]
            break
    return HTTPException(status_code=status_code, detail=error.message)


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/send-otp", response_model=OtpSentResponse)
def send_otp(
    body: SendOtpRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Email a signup passcode to an unregistered address."""
    try:
        receipt = auth_service.send_otp(body.email)
    except AuthError as e:
        raise to_http_exception(e) from e
    return OtpSentResponse(success=True, data=receipt)


@router.post("/verify-otp", response_model=MessageResponse)
def verify_otp(
    body: VerifyOtpRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Verify a signup passcode."""
    try:
        auth_service.verify_otp(body.email, body.otp)
    except AuthError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="OTP verified")


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user with email and password."""
    try:
        result = auth_service.register(
            body.name, body.email, body.password, body.confirm_password
        )
    except AuthError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    try:
        result = auth_service.login(body.email, body.password)
    except AuthError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.post("/google", response_model=AuthResponse)
def google_login(
    body: GoogleLoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with a Google ID token, creating the account on first use."""
    try:
        result = auth_service.google_login(body.credential)
    except AuthError as e:
        raise to_http_exception(e) from e
    return _auth_response(result)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    try:
        user = AuthService.current_user(current_user)
    except AuthError as e:
        raise to_http_exception(e) from e
    return user
