"""One-time passcode model."""

from sqlalchemy import Column, DateTime, Integer, String

from projecthub.database import Base
from projecthub.models.mixins import TimestampMixin


class OneTimePasscode(Base, TimestampMixin):
    """Pending signup passcode; at most one row per email."""

    __tablename__ = "one_time_passcodes"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
