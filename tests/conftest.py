"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from tests.test_constants import TEST_EMAIL, TEST_NAME, TEST_PASSWORD, TEST_SECRET_KEY

# Force an in-memory database and no outbound mail; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SMTP_HOST"] = ""
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from teamspace.main import app

    return TestClient(app)


@pytest.fixture
def db() -> Session:
    """Session over a fresh in-memory SQLite database with the full schema."""
    import teamspace.models  # noqa: F401
    from teamspace.db.session import Base, enable_sqlite_foreign_keys

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    session = Session(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client_with_db(db: Session) -> TestClient:
    """TestClient with get_db overridden to use the test db session (for integration tests)."""
    from teamspace.db.session import get_db
    from teamspace.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Tests that monkeypatch env vars need a fresh Settings instance."""
    from teamspace.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registered(db: Session):
    """Alice, registered through the normal flow (owns "Alice's Workspace")."""
    from teamspace.services.auth import register

    return register(db, TEST_EMAIL, TEST_PASSWORD, TEST_NAME)


@pytest.fixture
def auth_headers(registered) -> dict[str, str]:
    return {"Authorization": f"Bearer {registered.token}"}
