"""
Shared test fixtures for Panelera tests

Provides database setup, client creation, and user fixtures
"""
import os

# Must be set before panelera is imported: settings are read once at import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "panelera-test-signing-key")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("REPORT_LOCALE", "es")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from panelera.main import app
from panelera.db.base import Base
from panelera.db.session import get_db
from panelera.api.v1.deps import get_analytics_store
from panelera.core.security import create_access_token
from panelera.services.analytics_store import AnalyticsStore
from tests.factories import create_test_user, reset_sequences


@pytest.fixture
def engine(tmp_path):
    """
    File-backed SQLite database per test.

    Analytics reads run concurrently on worker threads, each with its own
    connection, so an in-memory database shared through one connection
    would not do.
    """
    # Import all models to ensure they're registered with Base
    import panelera.models  # noqa: F401

    engine = create_engine(
        f"sqlite:///{tmp_path / 'panelera_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create a fresh database session for each test"""
    reset_sequences()
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(session_factory):
    """Analytics store reading from the test database"""
    return AnalyticsStore(session_factory)


@pytest.fixture
def client(db_session, session_factory):
    """Create a test client with database and store overrides"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analytics_store] = lambda: AnalyticsStore(session_factory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    """Create an admin user for testing"""
    return create_test_user(db_session, email="admin@test.com", name="Admin User", role="ADMIN")


@pytest.fixture
def operator_user(db_session):
    """Create an operator user for testing"""
    return create_test_user(db_session, email="operario@test.com", name="Pedro Operario", role="OPERATOR")


@pytest.fixture
def admin_headers(admin_user):
    """Return authorization headers for admin user"""
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def operator_headers(operator_user):
    """Return authorization headers for operator user"""
    return {"Authorization": f"Bearer {create_access_token(operator_user.id)}"}
