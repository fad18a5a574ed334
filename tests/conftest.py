"""Pytest configuration and fixtures."""

import os

# Settings are read at import time; configure them before importing the app
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("GOOGLE_CLIENT_ID", "google-client-id")
os.environ.setdefault("BREVO_API_KEY", "brevo-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from projecthub.api.dependencies import get_email_notifier, get_google_verifier  # noqa: E402
from projecthub.database import Base, get_db  # noqa: E402
from projecthub.main import app  # noqa: E402
from projecthub.services.email import DeliveryError  # noqa: E402
from projecthub.services.google_identity import (  # noqa: E402
    FederatedFailureReason,
    FederatedIdentity,
    FederatedVerificationError,
)


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeNotifier:
    """Records emails instead of calling the provider."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def _record(self, **message) -> dict:
        if self.fail:
            raise DeliveryError("SMTP down")
        self.sent.append(message)
        return {"messageId": f"<msg-{len(self.sent)}>"}

    def send_otp(self, email, code):
        return self._record(kind="otp", email=email, code=code)

    def send_invite(self, email, subject=None):
        return self._record(kind="invite", email=email, subject=subject)

    def send_task_reminder(self, email, name, task_title, due_date):
        return self._record(kind="reminder", email=email, name=name, task_title=task_title)

    def last_code(self, email: str) -> str:
        codes = [m["code"] for m in self.sent if m["kind"] == "otp" and m["email"] == email]
        assert codes, f"no passcode sent to {email}"
        return codes[-1]


class FakeGoogleVerifier:
    """Maps credential strings to identities; anything else is rejected."""

    def __init__(self):
        self.identities: dict[str, FederatedIdentity] = {}

    def add(self, credential: str, email: str, name: str | None = None) -> None:
        self.identities[credential] = FederatedIdentity(email=email, name=name)

    def verify(self, credential: str) -> FederatedIdentity:
        if credential not in self.identities:
            raise FederatedVerificationError(FederatedFailureReason.SIGNATURE, "unknown token")
        return self.identities[credential]


if TEST_DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}
else:
    connect_args = {}
engine = create_engine(TEST_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in TEST_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(TEST_DATABASE_URL):
            create_database(TEST_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def google_verifier():
    return FakeGoogleVerifier()


@pytest.fixture(scope="function")
def client(db, notifier, google_verifier):
    """Create a test client with database and outbound service overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_notifier] = lambda: notifier
    app.dependency_overrides[get_google_verifier] = lambda: google_verifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, email: str, name: str = "Test User", password: str = "testpass123"):
    """Register a user through the API and return auth headers."""
    response = client.post(
        "/api/v1/auth/signup",
        json={
            "name": name,
            "email": email,
            "password": password,
            "confirmPassword": password,
        },
    )
    assert response.status_code == 201, response.text
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup(client, "test@example.com")


@pytest.fixture
def other_headers(client):
    """A second, unrelated user."""
    return signup(client, "other@example.com", name="Other User")


@pytest.fixture
def make_user(client):
    """Factory registering additional users."""

    def _make(email: str, name: str = "Test User", password: str = "testpass123"):
        return signup(client, email, name=name, password=password)

    return _make
