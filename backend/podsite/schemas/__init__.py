"""
API Schemas Package

Pydantic models for the episode record and API request/response validation.
"""

# Episode Schemas
from podsite.schemas.episode import (
    CarveOut,
    EpisodeDetailResponse,
    EpisodeMutationResponse,
    EpisodeRecord,
    PlainTranscript,
    Sponsor,
    SuccessResponse,
    TimedTranscript,
    TranscriptEntry,
    coerce_transcript,
)

# Catalog Schemas
from podsite.schemas.catalog import (
    EpisodeCatalogResponse,
    EpisodeSearchResponse,
    FeaturedToggleRequest,
    FeaturedToggleResponse,
    ShowcaseResponse,
)

# Import / Export Schemas
from podsite.schemas.transfer import (
    ExportDocument,
    ImportDocument,
    ImportFailureEntry,
    ImportResult,
)

# Auth Schemas
from podsite.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SessionStatusResponse,
    UploadResponse,
)

__all__ = [
    # Episode
    "CarveOut",
    "EpisodeDetailResponse",
    "EpisodeMutationResponse",
    "EpisodeRecord",
    "PlainTranscript",
    "Sponsor",
    "SuccessResponse",
    "TimedTranscript",
    "TranscriptEntry",
    "coerce_transcript",
    # Catalog
    "EpisodeCatalogResponse",
    "EpisodeSearchResponse",
    "FeaturedToggleRequest",
    "FeaturedToggleResponse",
    "ShowcaseResponse",
    # Import / Export
    "ExportDocument",
    "ImportDocument",
    "ImportFailureEntry",
    "ImportResult",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "SessionStatusResponse",
    "UploadResponse",
]
