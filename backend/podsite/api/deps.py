"""
API Dependencies

Collaborators are built once at startup and stored on app.state; routes reach
them through these dependencies so tests can swap them with
app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends, Request

from podsite.config import SESSION_COOKIE
from podsite.exceptions import AuthenticationRequired
from podsite.services.auth_service import SessionClaims, SessionTokenCodec
from podsite.services.media_service import MediaService
from podsite.stores import EpisodeStore, FallbackReader, LocalEpisodeStore

BEARER_PREFIX = "Bearer "


def get_store(request: Request) -> EpisodeStore:
    """Primary episode store"""
    return request.app.state.store


def get_local_store(request: Request) -> LocalEpisodeStore:
    """Local cache store (fallback reads and migration source)"""
    return request.app.state.local_store


def get_reader(request: Request) -> FallbackReader:
    """Public read path with local-cache fallback"""
    return request.app.state.reader


def get_codec(request: Request) -> SessionTokenCodec:
    return request.app.state.codec


def get_media_service(request: Request) -> MediaService:
    return request.app.state.media


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if header and header.startswith(BEARER_PREFIX):
        return header[len(BEARER_PREFIX):].strip()
    return None


def current_session(
    request: Request,
    codec: SessionTokenCodec = Depends(get_codec),
) -> Optional[SessionClaims]:
    """
    Resolve the admin session: Authorization header first, then the cookie.
    """
    claims = codec.claims_if_valid(bearer_token(request))
    if claims is not None:
        return claims
    return codec.claims_if_valid(request.cookies.get(SESSION_COOKIE))


def require_admin(claims: Optional[SessionClaims] = Depends(current_session)) -> SessionClaims:
    """Reject the request with 401 before any store access when no valid session exists."""
    if claims is None:
        raise AuthenticationRequired()
    return claims
