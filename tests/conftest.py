"""
Global test configuration and fixtures for Snippetbox

Every test gets its own temporary SQLite database. Two application flavours
are available:

* ``client`` runs the real SQLAlchemy gateways end to end;
* ``mock_client`` swaps the gateways for the in-memory doubles in
  ``tests/utils/mocks.py`` (sessions still live in SQLite).
"""

from datetime import timedelta
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from snippetbox.core.application import Application, build_application
from snippetbox.core.config import Settings
from snippetbox.core.limiter import limiter
from snippetbox.core.sessions import SessionManager
from snippetbox.db.init_db import init_database
from snippetbox.db.session import create_db_engine, create_session_factory
from snippetbox.main import create_app
from tests.utils.mocks import MockReviewModel, MockSnippetModel, MockUserModel

TEST_SECRET_KEY = "test-secret-key-for-testing-only-0123456789"
OWNER_EMAIL = "owner@example.com"


# ============================================================================
# Test Environment Setup
# ============================================================================

@pytest.fixture(scope="function")
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database"""
    return Settings(
        ENVIRONMENT="test",
        DEBUG=False,
        DATABASE_URL=f"sqlite:///{tmp_path / 'snippetbox.db'}",
        SECRET_KEY=TEST_SECRET_KEY,
        SESSION_COOKIE_SECURE=False,
        OWNER_EMAILS=OWNER_EMAIL,
        # Minimum bcrypt cost keeps the suite fast
        PASSWORD_HASH_ROUNDS=4,
    )


@pytest.fixture(scope="function", autouse=True)
def reset_limiter():
    """Clear rate limit counters so tests don't affect each other"""
    limiter.reset()
    yield
    limiter.reset()


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def engine(test_settings):
    db_engine = create_db_engine(test_settings.DATABASE_URL)
    init_database(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture(scope="function")
def session_manager(session_factory, test_settings) -> SessionManager:
    return SessionManager(
        session_factory,
        lifetime=timedelta(hours=test_settings.SESSION_LIFETIME_HOURS),
        cookie_name=test_settings.SESSION_COOKIE_NAME,
        cookie_secure=test_settings.SESSION_COOKIE_SECURE,
    )


# ============================================================================
# Application Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def application(test_settings) -> Application:
    """Application wired to the SQLAlchemy gateways"""
    app_container = build_application(test_settings)
    yield app_container
    app_container.engine.dispose()


@pytest.fixture(scope="function")
def app(application) -> FastAPI:
    return create_app(application, configure_logging=False)


@pytest.fixture(scope="function")
def client(app):
    """Create FastAPI test client"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def mock_application(test_settings, session_manager) -> Application:
    """Application wired to the in-memory store doubles"""
    users = MockUserModel()
    return Application(
        settings=test_settings,
        snippets=MockSnippetModel(),
        users=users,
        reviews=MockReviewModel(users),
        sessions=session_manager,
        secret_key=TEST_SECRET_KEY,
    )


@pytest.fixture(scope="function")
def mock_app(mock_application) -> FastAPI:
    return create_app(mock_application, configure_logging=False)


@pytest.fixture(scope="function")
def mock_client(mock_app):
    with TestClient(mock_app) as test_client:
        yield test_client


# ============================================================================
# Test Markers and Configuration
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Add markers based on file location"""
    for item in items:
        path = str(item.fspath)
        if "security" in path:
            item.add_marker(pytest.mark.security)
        if "integration" in path:
            item.add_marker(pytest.mark.integration)
        if "unit" in path or "stores" in path:
            item.add_marker(pytest.mark.unit)
