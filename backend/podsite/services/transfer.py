"""
Import / Export Service

Moves the whole catalog in and out of a store as a portable document.

1. export_catalog() - snapshot episodes + featured list
2. import_document() - bulk upsert a snapshot into a store
3. migrate_local() - copy the local cache store into the primary store

After an import the store is the source of truth; callers re-read it instead of
trusting the uploaded document.
"""
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from podsite.exceptions import PartialImportFailure, ValidationFailed
from podsite.schemas.transfer import ExportDocument, ImportDocument, ImportResult
from podsite.stores.base import EpisodeStore
from podsite.stores.local_store import LocalEpisodeStore


def export_catalog(store: EpisodeStore, now: Optional[datetime] = None) -> ExportDocument:
    """Snapshot the store into an export document."""
    catalog = store.list_episodes()
    document = ExportDocument(
        episodes=catalog.episodes,
        featured_slugs=catalog.featured_slugs,
        exported_at=now or datetime.now(timezone.utc),
    )
    logger.info(f"Exported {len(document.episodes)} episodes")
    return document


def export_filename(document: ExportDocument) -> str:
    """Download name, e.g. episodes-export-2024-06-01.json"""
    return f"episodes-export-{document.exported_at.date().isoformat()}.json"


def import_document(store: EpisodeStore, document: ImportDocument) -> ImportResult:
    """
    Upsert every episode in the document.

    Returns:
        ImportResult: When every record was imported

    Raises:
        PartialImportFailure: Some records imported, some rejected
        ValidationFailed: The document is empty or every record was rejected
    """
    if not document.episodes:
        raise ValidationFailed("Import document contains no episodes")

    result = store.bulk_import(document.episodes, document.featured_slugs)
    return raise_for_import_errors(result)


def raise_for_import_errors(result: ImportResult) -> ImportResult:
    """Map an import result to the error taxonomy."""
    if not result.errors:
        return result
    if result.imported_count == 0:
        raise ValidationFailed(f"Import failed: {result.summary()}")
    raise PartialImportFailure(result)


def migrate_local(local: LocalEpisodeStore, primary: EpisodeStore) -> ImportResult:
    """
    Copy every episode and the featured list from the local store into the primary store.

    Raises:
        ValidationFailed: The local store holds no episodes
        PartialImportFailure: Some records could not be copied
    """
    if local.is_empty():
        raise ValidationFailed("No local data to migrate")

    catalog = local.list_episodes()
    logger.info(f"Migrating {len(catalog.episodes)} local episodes to primary store")
    result = primary.bulk_import(catalog.episodes, catalog.featured_slugs)
    return raise_for_import_errors(result)
