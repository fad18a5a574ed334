"""JWT issuance and validation."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from projecthub.config import Settings


class TokenIssuer:
    """Signs and validates bearer tokens asserting a user's identity."""

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_minutes: int = 10080):
        if not secret:
            raise ValueError("A signing key is required")
        self._secret = secret
        self.algorithm = algorithm
        self.expiration = timedelta(minutes=expiration_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_minutes=settings.jwt_expiration_minutes,
        )

    def issue(self, subject_id: int, email: str, name: str) -> str:
        """Create a signed access token for the user."""
        issued_at = datetime.now(UTC)
        claims = {
            "sub": str(subject_id),
            "email": email,
            "name": name,
            "iat": issued_at,
            "exp": issued_at + self.expiration,
        }
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a token; None when the signature or expiry check fails."""
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except JWTError:
            return None
