"""Exceptions raised by the authentication services.

Each exception carries the client-facing message; the API layer decides the
HTTP status code.
"""


class AuthError(Exception):
    """Base class for authentication flow failures."""

    default_message = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AuthError):
    default_message = "Invalid input"


class AlreadyRegisteredError(AuthError):
    default_message = "Email is already registered"


class ConflictError(AuthError):
    default_message = "Email already in use"


class InvalidCredentialError(AuthError):
    default_message = "Invalid credentials"


class FederatedOnlyError(InvalidCredentialError):
    default_message = "Sign in with Google, this account has no password"


class UnauthorizedError(AuthError):
    default_message = "Unauthorized"


class OtpError(AuthError):
    """Base class for one-time passcode verification outcomes."""


class OtpNotFoundError(OtpError):
    default_message = "OTP not found"


class OtpExpiredError(OtpError):
    default_message = "OTP expired"


class OtpMismatchError(OtpError):
    default_message = "Invalid OTP"


class DeliveryFailedError(AuthError):
    default_message = "Failed to send OTP"


class InternalError(AuthError):
    default_message = "Internal server error"
