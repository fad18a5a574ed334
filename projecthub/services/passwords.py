"""Password hashing with bcrypt."""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Salted one-way password hashing with a configurable work factor."""

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        """Hash a password."""
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """Verify a password against its hash.

        An empty or malformed digest never matches.
        """
        if not digest or not plaintext:
            return False
        try:
            return self._context.verify(plaintext, digest)
        except (ValueError, TypeError):
            logger.warning("Stored password hash is not a recognised bcrypt digest")
            return False
