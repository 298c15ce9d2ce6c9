"""
Shared test fixtures.

Tests run against an in-memory SQLite store and a frozen clock.
"""

import datetime
import os

# Settings are read at import time; provide what the environment lacks
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-bizzleap-tests-only-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from bizzleap.core.config import Settings  # noqa: E402
from bizzleap.core.security import TokenIssuer  # noqa: E402
from bizzleap.db.session import Database  # noqa: E402
from bizzleap.main import create_app  # noqa: E402
from bizzleap.schemas.user import UserCreate  # noqa: E402
from bizzleap.services.oauth_client import OAuthClient  # noqa: E402

TEST_SECRET = "test-secret-key-for-bizzleap-tests-only-0123456789"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime.datetime):
        self.now = start

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + datetime.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock(datetime.datetime(2026, 1, 15, 12, 0, 0))


@pytest.fixture
def settings():
    return Settings(
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite://",
        BCRYPT_ROUNDS=4,
        AUTH_RATE_LIMIT=0,
        LOG_LEVEL="warning",
        FRONTEND_URL="http://frontend.test",
        GOOGLE_CLIENT_ID="google-client-id",
        GOOGLE_CLIENT_SECRET="google-client-secret",
        GITHUB_CLIENT_ID="github-client-id",
        GITHUB_CLIENT_SECRET="github-client-secret",
    )


@pytest.fixture
def database():
    database = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    database.open()
    database.create_all()
    yield database
    database.close()


@pytest.fixture
def db(database):
    with database.session() as session:
        yield session


@pytest.fixture
def oauth_client(settings, clock):
    return OAuthClient(settings, tokens=TokenIssuer.from_settings(settings, clock))


@pytest.fixture
def app(settings, database, oauth_client, clock):
    return create_app(settings=settings, database=database, oauth_client=oauth_client, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def registration():
    return UserCreate(first_name="Ada", last_name="Lovelace", email="ada@example.com", password="analytical-engine")
