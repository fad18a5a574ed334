"""Authentication schemas.

Request fields are optional on purpose: presence and format are checked by
the auth service so every flow reports its own 400 message.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SendOtpRequest(BaseModel):
    """Request a signup passcode."""

    email: str | None = None


class VerifyOtpRequest(BaseModel):
    """Submit a signup passcode."""

    email: str | None = None
    otp: str | None = None

    @field_validator("otp", mode="before")
    @classmethod
    def otp_as_string(cls, value: object) -> object:
        """Accept codes sent as JSON numbers."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class SignupRequest(BaseModel):
    """Email/password registration."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = Field(None, alias="confirmPassword")


class LoginRequest(BaseModel):
    """Email/password login."""

    email: str | None = None
    password: str | None = None


class GoogleLoginRequest(BaseModel):
    """Google sign-in with an ID token credential."""

    credential: str | None = None


class UserResponse(BaseModel):
    """Public user projection; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    authentication: str


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    token: str
    user: UserResponse


class OtpSentResponse(BaseModel):
    """Passcode was handed to the email provider."""

    success: bool = True
    data: dict = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
