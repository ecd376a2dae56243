"""
API Tests Fixtures

Shared fixtures for API unit tests.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from podsite.api.deps import get_codec, get_local_store, get_media_service, get_reader, get_store
from podsite.main import app
from podsite.services.auth_service import SessionTokenCodec
from podsite.services.media_service import LocalBlobStorage, MediaService
from podsite.stores import FallbackReader, LocalEpisodeStore, SqlEpisodeStore


# ==================== Dependency Overrides ====================


@pytest.fixture
def api_store(sql_store: SqlEpisodeStore) -> SqlEpisodeStore:
    """Primary store behind the API (in-memory database)"""
    return sql_store


@pytest.fixture
def api_local_store() -> LocalEpisodeStore:
    """Local cache store behind the API"""
    return LocalEpisodeStore()


@pytest.fixture
def media_root(tmp_path):
    return tmp_path / "media"


@pytest.fixture(autouse=True)
def override_dependencies(api_store, api_local_store, codec: SessionTokenCodec, media_root):
    """Automatically point every API dependency at test collaborators"""
    reader = FallbackReader(api_store, api_local_store)
    media = MediaService(LocalBlobStorage(media_root, "/media"))

    app.dependency_overrides[get_store] = lambda: api_store
    app.dependency_overrides[get_local_store] = lambda: api_local_store
    app.dependency_overrides[get_reader] = lambda: reader
    app.dependency_overrides[get_codec] = lambda: codec
    app.dependency_overrides[get_media_service] = lambda: media
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_dependencies) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with store overrides.

    Usage:
        def test_list_episodes(client):
            response = client.get("/api/episodes")
            assert response.status_code == 200
    """
    with TestClient(app) as test_client:
        yield test_client


# ==================== Auth Fixtures ====================


@pytest.fixture
def admin_token(codec: SessionTokenCodec) -> str:
    """Valid admin session token"""
    return codec.encode(codec.username)


@pytest.fixture
def auth_headers(admin_token: str) -> dict:
    """Authorization header for admin routes"""
    return {"Authorization": f"Bearer {admin_token}"}


# ==================== Test Data Fixtures ====================


@pytest.fixture
def seeded_store(api_store, make_episode):
    """Three episodes with 'nvidia' featured"""
    api_store.create(make_episode("costco", company="Costco Wholesale", date="2023-08-20"))
    api_store.create(make_episode("nvidia", company="NVIDIA", date="2024-06-01"))
    api_store.create(make_episode("hermes", company="Hermès", date="2023-01-15", episode=None, season="Special"))
    api_store.toggle_featured("nvidia")
    return api_store
