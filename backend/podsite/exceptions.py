"""
Application Exceptions

Typed failures raised by stores, services and the auth layer. The API layer maps
each of them to a stable HTTP outcome in podsite.main.
"""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from podsite.schemas.transfer import ImportResult


class PodsiteError(Exception):
    """Base class for all application errors."""

    error_type = "internal_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(PodsiteError):
    """Missing, invalid or expired admin session."""

    error_type = "authentication_required"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ValidationFailed(PodsiteError):
    """Malformed request body or missing required field."""

    error_type = "validation_error"


class DuplicateSlugError(PodsiteError):
    """An episode with the given slug already exists."""

    error_type = "duplicate_slug"

    def __init__(self, slug: str):
        super().__init__(f"Episode with this slug already exists: {slug}")
        self.slug = slug


class EpisodeNotFoundError(PodsiteError):
    """No episode is stored under the given slug."""

    error_type = "not_found"

    def __init__(self, slug: str):
        super().__init__(f"Episode not found: slug={slug}")
        self.slug = slug


class StoreError(PodsiteError):
    """Backing store communication failure."""

    error_type = "store_error"


class TokenDecodeError(PodsiteError):
    """Session token could not be decoded or failed its integrity check."""

    error_type = "invalid_token"


class PartialImportFailure(PodsiteError):
    """Bulk import finished with some records imported and some rejected."""

    error_type = "partial_import"

    def __init__(self, result: "ImportResult", message: Optional[str] = None):
        super().__init__(message or result.summary())
        self.result = result
