"""FastAPI dependencies for authentication, services and the database."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from projecthub.config import get_settings
from projecthub.database import get_db
from projecthub.models.user import User
from projecthub.services.auth import AuthService
from projecthub.services.email import EmailNotifier
from projecthub.services.google_identity import GoogleIdentityVerifier
from projecthub.services.metrics import MetricsService
from projecthub.services.otp import OtpEngine
from projecthub.services.passwords import PasswordHasher
from projecthub.services.tokens import TokenIssuer

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_password_hasher() -> PasswordHasher:
    """Get password hasher with the configured work factor."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


def get_token_issuer() -> TokenIssuer:
    """Get token issuer bound to the configured signing key."""
    return TokenIssuer.from_settings(get_settings())


def get_email_notifier() -> EmailNotifier:
    """Get email notifier instance."""
    return EmailNotifier(get_settings())


@lru_cache
def get_google_verifier() -> GoogleIdentityVerifier | None:
    """Get the shared Google ID token verifier, or None when Google sign-in is disabled.

    Built once so the HTTP session used to fetch Google's certificates is reused.
    """
    settings = get_settings()
    if not settings.google_login_enabled:
        return None
    return GoogleIdentityVerifier(settings.google_client_id)


def get_otp_engine(db: Annotated[Session, Depends(get_db)]) -> OtpEngine:
    """Get passcode engine with the configured lifetime."""
    return OtpEngine(db, expiration_minutes=get_settings().otp_expiration_minutes)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
    otp_engine: Annotated[OtpEngine, Depends(get_otp_engine)],
    notifier: Annotated[EmailNotifier, Depends(get_email_notifier)],
    google_verifier: Annotated[GoogleIdentityVerifier | None, Depends(get_google_verifier)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, hasher, tokens, otp_engine, notifier, google_verifier)


def get_metrics_service(db: Annotated[Session, Depends(get_db)]) -> MetricsService:
    """Get metrics service with dependencies."""
    return MetricsService(db)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None:
        raise _unauthorized("Unauthorized: no token provided")

    payload = tokens.decode(credentials.credentials)
    if payload is None:
        raise _unauthorized("Unauthorized: invalid token")

    user_id = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise _unauthorized("Unauthorized: invalid token")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise _unauthorized("Unauthorized: user not found")

    return user
