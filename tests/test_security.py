"""Password hashing, token and Google verification tests."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
from google.auth import exceptions as google_exceptions
from jose import jwt

from projecthub.api.dependencies import get_google_verifier
from projecthub.services.google_identity import (
    FederatedFailureReason,
    FederatedVerificationError,
    GoogleIdentityVerifier,
    classify_verification_error,
)
from projecthub.services.normalize import normalize_email, normalize_name
from projecthub.services.passwords import PasswordHasher
from projecthub.services.tokens import TokenIssuer

VERIFY_TOKEN = "projecthub.services.google_identity.id_token.verify_oauth2_token"


class TestPasswordHasher:
    """Tests for bcrypt hashing."""

    @pytest.fixture
    def hasher(self):
        return PasswordHasher(rounds=4)

    def test_hash_and_verify(self, hasher):
        digest = hasher.hash("secret123")
        assert digest != "secret123"
        assert digest.startswith("$2")
        assert hasher.verify("secret123", digest)
        assert not hasher.verify("secret124", digest)

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("secret123") != hasher.hash("secret123")

    def test_empty_digest_never_matches(self, hasher):
        assert not hasher.verify("anything", "")
        assert not hasher.verify("anything", None)

    def test_malformed_digest_never_matches(self, hasher):
        assert not hasher.verify("anything", "not-a-bcrypt-hash")


class TestTokenIssuer:
    """Tests for JWT issuance and validation."""

    def test_issue_and_decode(self):
        issuer = TokenIssuer(secret="k1", expiration_minutes=60)
        claims = issuer.decode(issuer.issue(7, "a@test.com", "Alice"))

        assert claims["sub"] == "7"
        assert claims["email"] == "a@test.com"
        assert claims["name"] == "Alice"
        assert claims["exp"] - claims["iat"] == 3600

    def test_wrong_key_rejected(self):
        token = TokenIssuer(secret="k1").issue(7, "a@test.com", "Alice")
        assert TokenIssuer(secret="k2").decode(token) is None

    def test_expired_rejected(self):
        issuer = TokenIssuer(secret="k1")
        past = datetime.now(UTC) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "7", "iat": past - timedelta(hours=1), "exp": past}, "k1", algorithm="HS256"
        )
        assert issuer.decode(token) is None

    def test_garbage_rejected(self):
        assert TokenIssuer(secret="k1").decode("garbage") is None

    def test_blank_secret_refused(self):
        with pytest.raises(ValueError):
            TokenIssuer(secret="")


class TestNormalize:
    def test_normalize_email(self):
        assert normalize_email("  Alice@Example.COM ") == "alice@example.com"
        assert normalize_email("nope") is None
        assert normalize_email("") is None
        assert normalize_email(None) is None

    def test_normalize_name(self):
        assert normalize_name("  Alice ") == "Alice"
        assert normalize_name("   ") is None
        assert normalize_name("x" * 120) == "x" * 120
        assert normalize_name("x" * 121) is None


class TestGoogleIdentityVerifier:
    """Tests for Google ID token verification."""

    @pytest.mark.parametrize(
        "message,reason",
        [
            ("Token has wrong audience foo, expected one of ['bar']", "wrong_audience"),
            ("Wrong issuer. 'iss' should be one of the following", "wrong_issuer"),
            ("Token expired, 1700000000 < 1600000000", "expired"),
            ("Token used too early, 1 < 2", "expired"),
            ("Could not verify token signature.", "signature"),
            ("Wrong number of segments in token", "malformed"),
        ],
    )
    def test_classify(self, message, reason):
        assert classify_verification_error(ValueError(message)) == reason

    def test_verify_returns_identity(self):
        claims = {"email": "g@gmail.com", "email_verified": True, "name": "G"}
        with patch(VERIFY_TOKEN, return_value=claims) as verify:
            identity = GoogleIdentityVerifier("client-id").verify("token")

        assert identity.email == "g@gmail.com"
        assert identity.name == "G"
        assert verify.call_args.kwargs["audience"] == "client-id"

    def test_verify_wrong_audience(self):
        with patch(VERIFY_TOKEN, side_effect=ValueError("Token has wrong audience x")):
            with pytest.raises(FederatedVerificationError) as exc_info:
                GoogleIdentityVerifier("client-id").verify("token")
        assert exc_info.value.reason == FederatedFailureReason.WRONG_AUDIENCE

    def test_verify_transport_error(self):
        error = google_exceptions.TransportError("certs unavailable")
        with patch(VERIFY_TOKEN, side_effect=error):
            with pytest.raises(FederatedVerificationError) as exc_info:
                GoogleIdentityVerifier("client-id").verify("token")
        assert exc_info.value.reason == FederatedFailureReason.TRANSPORT

    def test_verify_missing_email(self):
        with patch(VERIFY_TOKEN, return_value={"sub": "1"}):
            with pytest.raises(FederatedVerificationError) as exc_info:
                GoogleIdentityVerifier("client-id").verify("token")
        assert exc_info.value.reason == FederatedFailureReason.EMAIL_MISSING

    def test_verify_unverified_email(self):
        with patch(VERIFY_TOKEN, return_value={"email": "g@gmail.com", "email_verified": False}):
            with pytest.raises(FederatedVerificationError) as exc_info:
                GoogleIdentityVerifier("client-id").verify("token")
        assert exc_info.value.reason == FederatedFailureReason.EMAIL_UNVERIFIED

    def test_verify_requires_email_verified_claim(self):
        with patch(VERIFY_TOKEN, return_value={"email": "g@gmail.com", "name": "G"}):
            with pytest.raises(FederatedVerificationError) as exc_info:
                GoogleIdentityVerifier("client-id").verify("token")
        assert exc_info.value.reason == FederatedFailureReason.EMAIL_UNVERIFIED

    def test_provider_builds_verifier_once(self):
        get_google_verifier.cache_clear()
        first = get_google_verifier()

        assert isinstance(first, GoogleIdentityVerifier)
        assert get_google_verifier() is first
