"""Authentication flows: passcode signup, password login and Google sign-in."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from projecthub.models.enums import AuthProvider
from projecthub.models.user import NAME_MAX_LENGTH, User
from projecthub.services.email import DeliveryError, EmailNotifier
from projecthub.services.errors import (
    AlreadyRegisteredError,
    ConflictError,
    DeliveryFailedError,
    FederatedOnlyError,
    InternalError,
    InvalidCredentialError,
    InvalidInputError,
    UnauthorizedError,
)
from projecthub.services.google_identity import FederatedVerificationError, GoogleIdentityVerifier
from projecthub.services.normalize import normalize_email, normalize_name
from projecthub.services.otp import OtpEngine
from projecthub.services.passwords import PasswordHasher
from projecthub.services.tokens import TokenIssuer

logger = logging.getLogger(__name__)

GOOGLE_FAILED = "Google authentication failed"


@dataclass
class AuthResult:
    """A signed token together with the user it was issued for."""

    token: str
    user: User


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by normalized email."""
    return db.query(User).filter(User.email == email).first()


class AuthService:
    """Orchestrates the authentication flows over the credential store.

    Every collaborator is injected; the service holds no state between calls.
    """

    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        otp_engine: OtpEngine,
        notifier: EmailNotifier,
        google_verifier: GoogleIdentityVerifier | None = None,
    ):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens
        self.otp_engine = otp_engine
        self.notifier = notifier
        self.google_verifier = google_verifier

    @contextmanager
    def _store_boundary(self, failure_message: str) -> Iterator[None]:
        """Turn storage failures into a generic InternalError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{failure_message}: storage error", exc_info=True)
            raise InternalError(failure_message) from e

    def _issue(self, user: User) -> AuthResult:
        token = self.tokens.issue(user.id, user.email, user.name)
        return AuthResult(token=token, user=user)

    def send_otp(self, email: str | None) -> dict[str, Any]:
        """Issue a signup passcode for an unregistered email and mail it.

        Returns the notifier's delivery receipt. When delivery fails the
        passcode stays stored and valid.
        """
        normalized = normalize_email(email)
        if normalized is None:
            raise InvalidInputError("Invalid email")

        with self._store_boundary("Failed to send OTP"):
            if get_user_by_email(self.db, normalized):
                raise AlreadyRegisteredError()
            issued = self.otp_engine.issue(normalized)

        try:
            return self.notifier.send_otp(issued.email, issued.code)
        except DeliveryError as e:
            logger.warning(f"Passcode delivery to {normalized} failed: {e}")
            raise DeliveryFailedError() from e

    def verify_otp(self, email: str | None, code: str | None) -> None:
        """Check a submitted passcode; raises an OtpError subclass on failure."""
        normalized = (email or "").strip().lower()
        submitted = (code or "").strip()
        if not normalized or not submitted:
            raise InvalidInputError("Email and OTP required")

        with self._store_boundary("OTP verification failed"):
            self.otp_engine.verify(normalized, submitted)

    def register(
        self,
        name: str | None,
        email: str | None,
        password: str | None,
        confirm_password: str | None,
    ) -> AuthResult:
        """Create an email/password account and sign it in."""
        clean_name = normalize_name(name)
        normalized = normalize_email(email)
        if not clean_name or not normalized or not password or password != confirm_password:
            raise InvalidInputError("Invalid signup data")

        with self._store_boundary("Signup failed"):
            if get_user_by_email(self.db, normalized):
                raise ConflictError()

            user = User(
                name=clean_name,
                email=normalized,
                password_hash=self.hasher.hash(password),
                authentication=AuthProvider.EMAIL,
            )
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent signup for the same email
                self.db.rollback()
                raise ConflictError() from e
            self.db.refresh(user)

        logger.info(f"Registered user {user.id} ({user.email})")
        return self._issue(user)

    def login(self, email: str | None, password: str | None) -> AuthResult:
        """Authenticate with email and password."""
        normalized = (email or "").strip().lower()
        if not normalized or not password:
            raise InvalidInputError("Email and password required")

        with self._store_boundary("Login failed"):
            user = get_user_by_email(self.db, normalized)

        if user is None:
            logger.warning(f"Login rejected for {normalized}: no such user")
            raise InvalidCredentialError("Invalid credentials: user not found")
        if not user.has_password:
            logger.warning(f"Login rejected for {normalized}: federated-only account")
            raise FederatedOnlyError()
        if not self.hasher.verify(password, user.password_hash):
            logger.warning(f"Login rejected for {normalized}: wrong password")
            raise InvalidCredentialError("Invalid credentials: password incorrect")

        return self._issue(user)

    def google_login(self, credential: str | None) -> AuthResult:
        """Sign in with a Google ID token, creating the account on first use."""
        if not credential or self.google_verifier is None:
            raise InvalidInputError("Missing Google credential")

        try:
            identity = self.google_verifier.verify(credential)
        except FederatedVerificationError as e:
            logger.warning(f"Google token rejected ({e.reason}): {e.detail}")
            raise InvalidCredentialError(GOOGLE_FAILED) from e

        normalized = normalize_email(identity.email)
        if normalized is None:
            logger.warning("Google token carried an unusable email address")
            raise InvalidCredentialError(GOOGLE_FAILED)

        with self._store_boundary(GOOGLE_FAILED):
            user = get_user_by_email(self.db, normalized)
            if user is None:
                user = self._provision_google_user(normalized, identity.name)

        return self._issue(user)

    def _provision_google_user(self, email: str, name: str | None) -> User:
        display_name = normalize_name(name) or email.split("@")[0]
        user = User(
            name=display_name[:NAME_MAX_LENGTH],
            email=email,
            password_hash="",
            authentication=AuthProvider.GOOGLE,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent first login created the account
            self.db.rollback()
            existing = get_user_by_email(self.db, email)
            if existing is None:
                raise
            return existing
        self.db.refresh(user)
        logger.info(f"Provisioned Google user {user.id} ({user.email})")
        return user

    @staticmethod
    def current_user(user: User | None) -> User:
        """Return the authenticated caller or raise UnauthorizedError."""
        if user is None:
            raise UnauthorizedError()
        return user
