"""
Episode Stores

Interchangeable backends for the episode catalog, selected by storage.backend.
"""
from typing import Optional

from loguru import logger

from podsite.config import DATABASE_URL, LOCAL_STORE_PATH, STORAGE_BACKEND
from podsite.database import create_database_engine, create_session_factory, create_tables
from podsite.stores.base import EpisodeCatalog, EpisodeStore, toggle_slug
from podsite.stores.fallback import CatalogRead, EpisodeRead, FallbackReader
from podsite.stores.local_store import LocalEpisodeStore
from podsite.stores.sql_store import SqlEpisodeStore

SUPPORTED_BACKENDS = ("database", "local")


def create_episode_store(
    backend: Optional[str] = None,
    database_url: Optional[str] = None,
    local_path: Optional[str] = None,
) -> EpisodeStore:
    """
    Build the configured episode store.

    Args:
        backend: 'database' or 'local' (defaults to STORAGE_BACKEND)
        database_url: SQLAlchemy URL for the database backend
        local_path: JSON file for the local backend

    Raises:
        ValueError: Unsupported backend name
    """
    backend = (backend or STORAGE_BACKEND).lower()

    if backend == "database":
        engine = create_database_engine(database_url or DATABASE_URL)
        create_tables(engine)
        logger.info(f"Using database episode store: {engine.url.render_as_string(hide_password=True)}")
        return SqlEpisodeStore(create_session_factory(engine))

    if backend == "local":
        path = local_path or LOCAL_STORE_PATH
        logger.info(f"Using local episode store: {path}")
        return LocalEpisodeStore(path)

    raise ValueError(
        f"Unsupported storage backend: {backend}. "
        f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
    )


__all__ = [
    "CatalogRead",
    "EpisodeCatalog",
    "EpisodeRead",
    "EpisodeStore",
    "FallbackReader",
    "LocalEpisodeStore",
    "SqlEpisodeStore",
    "SUPPORTED_BACKENDS",
    "create_episode_store",
    "toggle_slug",
]
