"""
Import / Export Schemas

The export document is the portable snapshot downloaded from the admin panel and
later re-uploaded through the import endpoint.
"""
from datetime import datetime
from typing import Any

from pydantic import Field

from podsite.schemas.common import CamelModel
from podsite.schemas.episode import EpisodeRecord


class ExportDocument(CamelModel):
    """Full catalog snapshot"""

    episodes: list[EpisodeRecord]
    featured_slugs: list[str] = Field(default_factory=list)
    exported_at: datetime


class ImportDocument(CamelModel):
    """
    Import request.

    Episodes are kept as raw mappings so that one malformed entry is reported
    per record instead of rejecting the whole document.
    """

    episodes: list[dict[str, Any]]
    featured_slugs: list[str] = Field(default_factory=list)


class ImportFailureEntry(CamelModel):
    """One rejected record"""

    slug: str
    message: str


class ImportResult(CamelModel):
    """Bulk import outcome"""

    imported_count: int = 0
    errors: list[ImportFailureEntry] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """Operator-facing aggregate message."""
        message = f"Imported {self.imported_count} episodes"
        if self.errors:
            failures = "; ".join(f"{e.slug}: {e.message}" for e in self.errors)
            message += f", {len(self.errors)} failed: {failures}"
        return message
