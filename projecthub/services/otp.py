"""One-time passcode issuance and verification."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from projecthub.models.otp import OneTimePasscode
from projecthub.services.errors import OtpExpiredError, OtpMismatchError, OtpNotFoundError

logger = logging.getLogger(__name__)

CODE_MIN = 100000
CODE_MAX = 999999


@dataclass(frozen=True)
class IssuedPasscode:
    """A freshly issued passcode, handed to the notifier for delivery."""

    email: str
    code: str
    expires_at: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back out; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class OtpEngine:
    """Issues and verifies short-lived numeric codes bound to an email address.

    At most one live passcode exists per email: issuing again replaces the
    previous code and restarts its expiry window.
    """

    def __init__(
        self,
        db: Session,
        expiration_minutes: int = 10,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db = db
        self.ttl = timedelta(minutes=expiration_minutes)
        self._clock = clock or (lambda: datetime.now(UTC))

    @staticmethod
    def generate_code() -> str:
        """Six-digit code drawn uniformly from [100000, 999999]."""
        return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))

    def issue(self, email: str) -> IssuedPasscode:
        """Generate a code for the email, replacing any existing one."""
        code = self.generate_code()
        expires_at = self._clock() + self.ttl

        record = self.db.query(OneTimePasscode).filter(OneTimePasscode.email == email).first()
        if record:
            record.code = code
            record.expires_at = expires_at
        else:
            record = OneTimePasscode(email=email, code=code, expires_at=expires_at)
            self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent issue inserted the row first; the last writer wins
            self.db.rollback()
            logger.info(f"Concurrent passcode issue for {email}, replacing it")
            self.db.query(OneTimePasscode).filter(OneTimePasscode.email == email).update(
                {OneTimePasscode.code: code, OneTimePasscode.expires_at: expires_at},
                synchronize_session=False,
            )
            self.db.commit()

        logger.info(f"Issued passcode for {email}, expires at {expires_at.isoformat()}")
        return IssuedPasscode(email=email, code=code, expires_at=expires_at)

    def verify(self, email: str, code: str) -> None:
        """Check a submitted code.

        Raises:
            OtpNotFoundError: no passcode was issued for the email
            OtpExpiredError: the passcode expired; it is deleted
            OtpMismatchError: wrong code; the passcode stays valid until expiry
        """
        record = self.db.query(OneTimePasscode).filter(OneTimePasscode.email == email).first()
        if record is None:
            raise OtpNotFoundError()

        if self._clock() >= _as_utc(record.expires_at):
            self.db.delete(record)
            self.db.commit()
            logger.info(f"Expired passcode for {email} removed")
            raise OtpExpiredError()

        if not secrets.compare_digest(record.code.encode(), code.encode()):
            logger.warning(f"Passcode mismatch for {email}")
            raise OtpMismatchError()

        self.db.delete(record)
        self.db.commit()
        logger.info(f"Passcode verified for {email}")
