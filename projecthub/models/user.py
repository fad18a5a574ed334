"""User model."""

from sqlalchemy import Column, Integer, String

from projecthub.database import Base
from projecthub.models.mixins import TimestampMixin

NAME_MAX_LENGTH = 120


class User(Base, TimestampMixin):
    """Account that owns projects and is assigned tasks."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Empty string marks a federated-only account
    password_hash = Column(String(255), nullable=False, default="")
    authentication = Column(String(20), nullable=False, default="")

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)
