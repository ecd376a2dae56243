"""
Episode Store Interface

Every backend stores episode records keyed by slug plus an ordered featured
list. The shared operations (slug derivation, duplicate checks, the featured
toggle, delete cascade, bulk import) live here so that all backends behave the
same; backends only implement the primitive reads and writes.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger
from pydantic import ValidationError

from podsite.config import MAX_FEATURED
from podsite.exceptions import (
    DuplicateSlugError,
    EpisodeNotFoundError,
    PodsiteError,
    ValidationFailed,
)
from podsite.schemas.episode import EpisodeRecord
from podsite.schemas.transfer import ImportFailureEntry, ImportResult
from podsite.utils.slug_utils import derive_slug


@dataclass
class EpisodeCatalog:
    """Snapshot returned by EpisodeStore.list_episodes()."""
    episodes: list[EpisodeRecord] = field(default_factory=list)
    featured_slugs: list[str] = field(default_factory=list)


def toggle_slug(featured: list[str], slug: str, limit: int = MAX_FEATURED) -> list[str]:
    """
    Toggle a slug in a featured list.

    Present slugs are removed. Absent slugs are inserted at the front and the
    last entries are evicted so the list never exceeds `limit`.
    """
    if slug in featured:
        return [s for s in featured if s != slug]
    return [slug, *featured][:limit]


class EpisodeStore(ABC):
    """
    Abstract episode store.

    Failures:
        EpisodeNotFoundError: Unknown slug on get/update/delete
        DuplicateSlugError: Create with an existing slug
        ValidationFailed: Create with a title that yields no slug
        StoreError: Backing store failure (raised by backends)
    """

    max_featured: int = MAX_FEATURED

    # ==================== Backend primitives ====================

    @abstractmethod
    def _all_records(self) -> list[EpisodeRecord]:
        """All records in storage order."""

    @abstractmethod
    def _featured(self) -> list[str]:
        """Featured slugs, front first."""

    @abstractmethod
    def _fetch(self, slug: str) -> Optional[EpisodeRecord]:
        """Record by slug, or None."""

    @abstractmethod
    def _insert(self, record: EpisodeRecord) -> None:
        """Insert a record whose slug is known to be free."""

    @abstractmethod
    def _replace(self, record: EpisodeRecord) -> None:
        """Replace the record stored under record.slug."""

    @abstractmethod
    def _upsert(self, record: EpisodeRecord) -> None:
        """Insert or replace by slug."""

    @abstractmethod
    def _remove(self, slug: str) -> None:
        """Remove the record stored under slug."""

    @abstractmethod
    def _write_featured(self, slugs: list[str]) -> None:
        """Persist the featured list."""

    # ==================== Public operations ====================

    def list_episodes(self) -> EpisodeCatalog:
        return EpisodeCatalog(episodes=self._all_records(), featured_slugs=self._featured())

    def get_featured_slugs(self) -> list[str]:
        return self._featured()

    def get_by_slug(self, slug: str) -> EpisodeRecord:
        record = self._fetch(slug)
        if record is None:
            raise EpisodeNotFoundError(slug)
        return record

    def create(self, record: EpisodeRecord) -> EpisodeRecord:
        """
        Create an episode, deriving the slug from the title when blank.

        Raises:
            ValidationFailed: The title yields an empty slug
            DuplicateSlugError: The slug is already taken
        """
        slug = record.slug or derive_slug(record.title)
        if not slug:
            raise ValidationFailed(f"Cannot derive a slug from title: {record.title!r}")
        record = record.model_copy(update={"slug": slug})

        if self._fetch(slug) is not None:
            raise DuplicateSlugError(slug)

        self._insert(record)
        logger.info(f"Created episode: slug={slug}")
        return record

    def update(self, record: EpisodeRecord) -> EpisodeRecord:
        """Fully replace the episode stored under record.slug (no field merge)."""
        if not record.slug or self._fetch(record.slug) is None:
            raise EpisodeNotFoundError(record.slug)

        self._replace(record)
        logger.info(f"Updated episode: slug={record.slug}")
        return record

    def delete(self, slug: str) -> None:
        """Delete an episode and drop it from the featured list."""
        if self._fetch(slug) is None:
            raise EpisodeNotFoundError(slug)

        self._remove(slug)
        featured = self._featured()
        if slug in featured:
            self._write_featured([s for s in featured if s != slug])
        logger.info(f"Deleted episode: slug={slug}")

    def toggle_featured(self, slug: str) -> list[str]:
        """
        Add or remove a slug from the featured list.

        Adding requires an existing episode; the newest entry goes to the front
        and the oldest is evicted past max_featured.

        Returns:
            list[str]: The new featured list
        """
        featured = self._featured()
        if slug not in featured and self._fetch(slug) is None:
            raise EpisodeNotFoundError(slug)

        updated = toggle_slug(featured, slug, self.max_featured)
        self._write_featured(updated)
        logger.info(f"Toggled featured: slug={slug}, featured={updated}")
        return updated

    def bulk_import(
        self,
        records: Iterable[EpisodeRecord | dict],
        featured_slugs: Iterable[str] = (),
    ) -> ImportResult:
        """
        Upsert every record by slug, continuing past per-record failures.

        Imported records listed in featured_slugs become featured (in the given
        order, ahead of the existing list); imported records not listed are
        un-featured. Featured status of records outside the batch is untouched.

        Args:
            records: EpisodeRecord objects or raw wire mappings
            featured_slugs: Slugs to mark as featured

        Returns:
            ImportResult: Imported count and per-record errors
        """
        wanted = list(dict.fromkeys(featured_slugs))
        result = ImportResult()
        imported: list[str] = []

        for index, raw in enumerate(records):
            slug = _raw_slug(raw, index)
            try:
                record = raw if isinstance(raw, EpisodeRecord) else EpisodeRecord.model_validate(raw)
                slug = record.slug or derive_slug(record.title)
                if not slug:
                    raise ValidationFailed("Cannot derive a slug from title")
                self._upsert(record.model_copy(update={"slug": slug}))
            except ValidationError as e:
                result.errors.append(ImportFailureEntry(slug=slug, message=_validation_message(e)))
                continue
            except PodsiteError as e:
                result.errors.append(ImportFailureEntry(slug=slug, message=e.message))
                continue

            imported.append(slug)

        # Duplicates within the batch overwrite each other and count once
        result.imported_count = len(dict.fromkeys(imported))

        if imported:
            imported_set = set(imported)
            current = [s for s in self._featured() if s not in imported_set]
            promoted = [s for s in wanted if s in imported_set]
            self._write_featured((promoted + current)[: self.max_featured])

        if result.errors:
            logger.warning(f"Bulk import finished with errors: {result.summary()}")
        else:
            logger.info(f"Bulk import finished: imported={result.imported_count}")
        return result


def _raw_slug(raw: EpisodeRecord | dict, index: int) -> str:
    """Best-effort identifier for error reporting before validation."""
    if isinstance(raw, EpisodeRecord):
        return raw.slug or derive_slug(raw.title)
    if isinstance(raw, dict):
        slug = raw.get("slug")
        if isinstance(slug, str) and slug.strip():
            return slug.strip()
        title = raw.get("title")
        if isinstance(title, str) and derive_slug(title):
            return derive_slug(title)
    return f"#{index}"


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else item.get("msg", ""))
    return "; ".join(parts)
