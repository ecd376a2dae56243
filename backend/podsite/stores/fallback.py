"""
Read-through fallback for public catalog reads.

When the primary store raises StoreError the reader serves the local cache
instead and flags the result as stale. Writes never go through here.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from podsite.exceptions import StoreError
from podsite.schemas.episode import EpisodeRecord
from podsite.stores.base import EpisodeCatalog, EpisodeStore


@dataclass
class CatalogRead:
    """Catalog snapshot plus whether it came from the fallback cache."""
    catalog: EpisodeCatalog
    stale: bool = False


@dataclass
class EpisodeRead:
    """Single record plus whether it came from the fallback cache."""
    episode: EpisodeRecord
    stale: bool = False


class FallbackReader:
    """
    Reads from the primary store, falling back to a secondary store on StoreError.

    Attributes:
        primary: Authoritative store
        fallback: Local cache store, or None to disable the fallback
    """

    def __init__(self, primary: EpisodeStore, fallback: Optional[EpisodeStore] = None):
        self.primary = primary
        self.fallback = fallback

    def list_episodes(self) -> CatalogRead:
        try:
            return CatalogRead(self.primary.list_episodes())
        except StoreError as e:
            if self.fallback is None:
                raise
            logger.warning(f"Primary store unavailable, serving local cache: {e.message}")
            return CatalogRead(self.fallback.list_episodes(), stale=True)

    def get_by_slug(self, slug: str) -> EpisodeRead:
        try:
            return EpisodeRead(self.primary.get_by_slug(slug))
        except StoreError as e:
            if self.fallback is None:
                raise
            logger.warning(f"Primary store unavailable, serving local cache for {slug}: {e.message}")
            return EpisodeRead(self.fallback.get_by_slug(slug), stale=True)
