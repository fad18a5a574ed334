"""Verification of Google sign-in ID tokens."""

import logging
from dataclasses import dataclass
from enum import StrEnum

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

logger = logging.getLogger(__name__)


class FederatedFailureReason(StrEnum):
    """Internal reason a provider token was rejected. Logged, never returned."""

    MALFORMED = "malformed"
    WRONG_AUDIENCE = "wrong_audience"
    WRONG_ISSUER = "wrong_issuer"
    EXPIRED = "expired"
    SIGNATURE = "signature"
    EMAIL_UNVERIFIED = "email_unverified"
    EMAIL_MISSING = "email_missing"
    TRANSPORT = "transport"


class FederatedVerificationError(Exception):
    """The provider token could not be verified."""

    def __init__(self, reason: FederatedFailureReason, detail: str = "") -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"{reason}: {detail}" if detail else str(reason))


@dataclass(frozen=True)
class FederatedIdentity:
    """Identity asserted by the provider."""

    email: str
    name: str | None


def classify_verification_error(error: ValueError) -> FederatedFailureReason:
    """Map google-auth's validation messages onto a failure reason."""
    message = str(error).lower()
    if "audience" in message:
        return FederatedFailureReason.WRONG_AUDIENCE
    if "issuer" in message:
        return FederatedFailureReason.WRONG_ISSUER
    if "expired" in message or "too early" in message:
        return FederatedFailureReason.EXPIRED
    if "signature" in message:
        return FederatedFailureReason.SIGNATURE
    return FederatedFailureReason.MALFORMED


class GoogleIdentityVerifier:
    """Validates Google ID tokens against Google's public keys and our client id."""

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        self._request = google_requests.Request()

    def verify(self, credential: str) -> FederatedIdentity:
        """Verify the token and return the email and name it asserts.

        Raises:
            FederatedVerificationError: on any validation failure
        """
        try:
            claims = id_token.verify_oauth2_token(
                credential, self._request, audience=self.client_id
            )
        except google_exceptions.TransportError as e:
            raise FederatedVerificationError(FederatedFailureReason.TRANSPORT, str(e)) from e
        except ValueError as e:
            raise FederatedVerificationError(classify_verification_error(e), str(e)) from e

        email = claims.get("email")
        if not email:
            raise FederatedVerificationError(FederatedFailureReason.EMAIL_MISSING)
        if claims.get("email_verified") is not True:
            raise FederatedVerificationError(FederatedFailureReason.EMAIL_UNVERIFIED, email)

        logger.debug(f"Google token verified for {email}")
        return FederatedIdentity(email=email, name=claims.get("name"))
