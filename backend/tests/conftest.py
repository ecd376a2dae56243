"""
Pytest Configuration Fixtures

Sets up the test environment with isolated stores and a fixed session key.
"""
import os

# Set test environment variables BEFORE importing podsite modules
# This ensures the config module never points at a real database or secret
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ADMIN_PASSWORD", "test_admin_password")
os.environ.setdefault("SESSION_SECRET", "test_session_secret")

import pytest

from podsite.database import create_database_engine, create_session_factory, create_tables, drop_tables
from podsite.schemas.episode import EpisodeRecord
from podsite.services.auth_service import SessionTokenCodec
from podsite.stores import LocalEpisodeStore, SqlEpisodeStore

TEST_SECRET = "unit-test-secret"


@pytest.fixture(scope="function")
def test_engine():
    """
    Create an isolated in-memory SQLite engine for testing.

    Each test function gets a fresh database.
    """
    engine = create_database_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_engine):
    """
    Create a session factory for testing.

    All tables are created before the test and dropped after.
    """
    create_tables(test_engine)
    yield create_session_factory(test_engine)
    drop_tables(test_engine)


@pytest.fixture(scope="function")
def test_session(test_session_factory):
    """Create a database session for testing."""
    session = test_session_factory()
    yield session
    session.close()


@pytest.fixture
def sql_store(test_session_factory) -> SqlEpisodeStore:
    """Database-backed store over the in-memory engine"""
    return SqlEpisodeStore(test_session_factory)


@pytest.fixture
def local_store() -> LocalEpisodeStore:
    """Purely in-memory local store"""
    return LocalEpisodeStore()


@pytest.fixture(params=["database", "local"])
def store(request):
    """Runs the test once per store backend."""
    if request.param == "database":
        return request.getfixturevalue("sql_store")
    return request.getfixturevalue("local_store")


@pytest.fixture
def codec() -> SessionTokenCodec:
    """Session codec with a fixed key"""
    return SessionTokenCodec(secret=TEST_SECRET)


@pytest.fixture
def make_episode():
    """
    Factory for EpisodeRecord test data.

    Usage:
        episode = make_episode("coca-cola", date="2024-01-01")
    """
    def _make(slug: str = "test-episode", **overrides) -> EpisodeRecord:
        data = {
            "slug": slug,
            "title": overrides.pop("title", slug.replace("-", " ").title() or "Untitled"),
            "company": "Test Company",
            "duration": "2h 30m",
            "description": f"Full story of {slug}",
            "season": "13",
            "episode": "1",
            "date": "2024-01-01",
            "cover_image": "",
        }
        data.update(overrides)
        return EpisodeRecord(**data)

    return _make
