"""Shared fixtures: in-memory database, API test client, registered users."""

import os

os.environ.setdefault("AUTH_SECRET", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from collections.abc import Generator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api.deps import get_db_session
from app.main import app
from app.models.user import User, UserCreate
from app.services.auth import register_user
from tests.helpers import PASSWORD, register


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite engine per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def override_db(engine) -> Generator[None, None, None]:
    """Route the app's session dependency to the test engine."""

    def _get_test_session() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(override_db) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def asgi_transport(override_db) -> httpx.ASGITransport:
    """Transport that sends client requests straight into the app."""
    return httpx.ASGITransport(app=app)


@pytest.fixture()
def test_user(db_session: Session) -> User:
    result = register_user(
        db_session,
        UserCreate(
            name="Test User",
            email="test@example.com",
            password=PASSWORD,
            password_confirmation=PASSWORD,
        ),
    )
    return result.value


@pytest.fixture()
def ana(client: TestClient) -> dict:
    """Registered user Ana; the register response body."""
    return register(client, "Ana", "ana@x.com")


@pytest.fixture()
def bob(client: TestClient) -> dict:
    return register(client, "Bob", "bob@x.com")
