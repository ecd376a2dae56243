"""
Local episode store.

Keeps the catalog in process memory and, when a path is given, mirrors it to a
JSON file in export-document shape:

    {"episodes": [...], "featuredSlugs": [...]}

It backs the `local` storage mode and serves as the read-only fallback cache
when the primary database is unreachable.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from pydantic import ValidationError

from podsite.exceptions import StoreError
from podsite.schemas.episode import EpisodeRecord
from podsite.stores.base import EpisodeStore


class LocalEpisodeStore(EpisodeStore):
    """
    In-process episode store with optional JSON file persistence.

    Attributes:
        path: JSON file path, or None for a purely in-memory store
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        episodes: Optional[list[EpisodeRecord]] = None,
        featured_slugs: Optional[list[str]] = None,
    ):
        self.path = Path(path) if path else None
        self._episodes: list[EpisodeRecord] = list(episodes or [])
        self._featured_slugs: list[str] = list(featured_slugs or [])
        self._loaded = self.path is None or episodes is not None

    # ==================== File persistence ====================

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True

        if not self.path.exists():
            logger.debug(f"Local episode store not found, starting empty: {self.path}")
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._episodes = [EpisodeRecord.model_validate(e) for e in data.get("episodes", [])]
            self._featured_slugs = list(data.get("featuredSlugs", []))
        except (OSError, ValueError, ValidationError) as e:
            self._loaded = False
            logger.error(f"Failed to read local episode store {self.path}: {e}")
            raise StoreError(f"Failed to read local episode store: {e}") from e

    def _commit(
        self,
        episodes: Optional[list[EpisodeRecord]] = None,
        featured_slugs: Optional[list[str]] = None,
    ) -> None:
        """Persist the new state first; memory only changes once the write succeeded."""
        episodes = self._episodes if episodes is None else episodes
        featured_slugs = self._featured_slugs if featured_slugs is None else featured_slugs
        self._save(episodes, featured_slugs)
        self._episodes = episodes
        self._featured_slugs = featured_slugs

    def _save(self, episodes: list[EpisodeRecord], featured_slugs: list[str]) -> None:
        if self.path is None:
            return

        payload = {
            "episodes": [e.to_wire() for e in episodes],
            "featuredSlugs": featured_slugs,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Atomic replace
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write local episode store {self.path}: {e}")
            raise StoreError(f"Failed to write local episode store: {e}") from e

    def _index_of(self, slug: str) -> int:
        for index, episode in enumerate(self._episodes):
            if episode.slug == slug:
                return index
        return -1

    # ==================== Reads ====================

    def _all_records(self) -> list[EpisodeRecord]:
        self._ensure_loaded()
        return list(self._episodes)

    def _featured(self) -> list[str]:
        self._ensure_loaded()
        return list(self._featured_slugs)

    def _fetch(self, slug: str) -> Optional[EpisodeRecord]:
        self._ensure_loaded()
        index = self._index_of(slug)
        return self._episodes[index] if index != -1 else None

    def is_empty(self) -> bool:
        self._ensure_loaded()
        return not self._episodes

    # ==================== Writes ====================

    def _insert(self, record: EpisodeRecord) -> None:
        self._ensure_loaded()
        # Insertion order, same as the database backend's id order
        self._commit(episodes=[*self._episodes, record])

    def _replace(self, record: EpisodeRecord) -> None:
        self._ensure_loaded()
        episodes = list(self._episodes)
        episodes[self._index_of(record.slug)] = record
        self._commit(episodes=episodes)

    def _upsert(self, record: EpisodeRecord) -> None:
        self._ensure_loaded()
        if self._index_of(record.slug) == -1:
            self._insert(record)
        else:
            self._replace(record)

    def _remove(self, slug: str) -> None:
        self._ensure_loaded()
        self._commit(episodes=[e for e in self._episodes if e.slug != slug])

    def _write_featured(self, slugs: list[str]) -> None:
        self._ensure_loaded()
        self._commit(featured_slugs=list(slugs))
