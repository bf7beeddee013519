"""
Test configuration and fixtures for Vacation Planner.

- Fresh in-memory SQLite database per test (tables created and dropped)
- TestClient with database dependency override
- Users and sessions for each role
"""

import os

# The application engine is built at import time; keep it off Postgres in tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from vacationplanner.database import get_db
from vacationplanner.main import app
from vacationplanner.models import Base, User, UserRole, Session as UserSession
from tests.factories import create_user, create_session


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """TEST_DATABASE_URL if set, otherwise a private in-memory SQLite database."""
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def test_engine():
    """
    Create a database engine for one test.

    In-memory SQLite needs a single shared connection (StaticPool) so the
    TestClient's worker thread sees the same tables.
    """
    database_url = get_test_database_url()
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Provide a database session for the test."""
    TestingSessionLocal = sessionmaker(bind=test_engine)
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# TestClient Fixtures
# =============================================================================


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with database dependency override.

    The database session is injected into the app's get_db dependency.
    """

    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
def agent_user(db: Session) -> User:
    """Create an agent (lowest role) test user."""
    return create_user(
        db, email="agent@example.com", password="agentpassword123", role=UserRole.AGENT
    )


@pytest.fixture
def manager_user(db: Session) -> User:
    """Create a manager test user."""
    return create_user(
        db,
        email="manager@example.com",
        password="managerpassword123",
        role=UserRole.MANAGER,
    )


@pytest.fixture
def admin_user(db: Session) -> User:
    """Create an admin test user."""
    return create_user(
        db, email="admin@example.com", password="adminpassword123", role=UserRole.ADMIN
    )


@pytest.fixture
def agent_session(db: Session, agent_user: User) -> UserSession:
    return create_session(db, agent_user)


@pytest.fixture
def manager_session(db: Session, manager_user: User) -> UserSession:
    return create_session(db, manager_user)


@pytest.fixture
def admin_session(db: Session, admin_user: User) -> UserSession:
    return create_session(db, admin_user)


@pytest.fixture
def agent_headers(agent_session: UserSession) -> dict:
    """Bearer header for the agent session."""
    return {"Authorization": f"Bearer {agent_session.token}"}


@pytest.fixture
def manager_headers(manager_session: UserSession) -> dict:
    return {"Authorization": f"Bearer {manager_session.token}"}


@pytest.fixture
def admin_headers(admin_session: UserSession) -> dict:
    return {"Authorization": f"Bearer {admin_session.token}"}


@pytest.fixture
def admin_cookie_headers(admin_session: UserSession) -> dict:
    """Cookie header carrying the admin session, as a browser would send it."""
    return {"Cookie": f"session_token={admin_session.token}"}


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "security: marks tests as security tests (deselect with '-m not security')",
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
