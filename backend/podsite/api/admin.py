"""
Admin API Routes

Episode management for the admin panel. Every route requires a valid admin
session (Authorization: Bearer <token> or the session cookie); unauthenticated
calls get 401 before the store is touched.
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from podsite.api.deps import get_local_store, get_media_service, get_store, require_admin
from podsite.exceptions import ValidationFailed
from podsite.schemas.auth import UploadResponse
from podsite.schemas.catalog import (
    EpisodeCatalogResponse,
    FeaturedToggleRequest,
    FeaturedToggleResponse,
)
from podsite.schemas.episode import EpisodeMutationResponse, EpisodeRecord, SuccessResponse
from podsite.schemas.transfer import ImportDocument, ImportResult
from podsite.services.media_service import MediaService
from podsite.services.transfer import export_catalog, export_filename, import_document, migrate_local
from podsite.stores import EpisodeStore, LocalEpisodeStore


router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


# ==================== Episode CRUD ====================


@router.get("/episodes", response_model=EpisodeCatalogResponse, response_model_exclude_none=True)
async def admin_list_episodes(store: EpisodeStore = Depends(get_store)):
    """
    List every episode in storage order with the featured slug list.

    Reads the primary store directly; no fallback cache in the admin panel.
    """
    catalog = store.list_episodes()
    return EpisodeCatalogResponse(episodes=catalog.episodes, featured_slugs=catalog.featured_slugs)


@router.post(
    "/episodes",
    response_model=EpisodeMutationResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_episode(record: EpisodeRecord, store: EpisodeStore = Depends(get_store)):
    """
    Create an episode.

    - **slug**: optional, derived from the title when blank
    - Returns 409 when the slug is already taken
    """
    return EpisodeMutationResponse(episode=store.create(record))


@router.put("/episodes/{slug}", response_model=EpisodeMutationResponse, response_model_exclude_none=True)
async def update_episode(slug: str, record: EpisodeRecord, store: EpisodeStore = Depends(get_store)):
    """
    Replace an episode.

    The body is the complete new record; omitted optional fields are cleared,
    not merged from the stored version. Returns 404 for an unknown slug.
    """
    if record.slug and record.slug != slug:
        raise ValidationFailed(f"Body slug '{record.slug}' does not match path slug '{slug}'")

    updated = store.update(record.model_copy(update={"slug": slug}))
    return EpisodeMutationResponse(episode=updated)


@router.delete("/episodes/{slug}", response_model=SuccessResponse)
async def delete_episode(slug: str, store: EpisodeStore = Depends(get_store)):
    """
    Delete an episode.

    Also removes it from the featured list. Returns 404 for an unknown slug.
    """
    store.delete(slug)
    return SuccessResponse()


@router.post("/episodes/featured", response_model=FeaturedToggleResponse)
async def toggle_featured(data: FeaturedToggleRequest, store: EpisodeStore = Depends(get_store)):
    """
    Toggle an episode's featured status.

    Adding puts it at the front; the list holds at most 6 slugs and the
    oldest entry is evicted.
    """
    if not data.slug:
        raise ValidationFailed("slug is required")
    return FeaturedToggleResponse(featured_slugs=store.toggle_featured(data.slug))


# ==================== Import / Export ====================


@router.get("/export")
async def export_episodes(store: EpisodeStore = Depends(get_store)):
    """Download the full catalog as episodes-export-YYYY-MM-DD.json."""
    document = export_catalog(store)
    return JSONResponse(
        content=document.to_wire(),
        headers={"Content-Disposition": f'attachment; filename="{export_filename(document)}"'},
    )


@router.post("/import", response_model=ImportResult)
async def import_episodes(document: ImportDocument, store: EpisodeStore = Depends(get_store)):
    """
    Upsert every episode in an export document.

    - 200: all records imported
    - 207: some records rejected (aggregate message lists slug and reason)
    - 400: nothing imported

    Re-fetch the catalog afterwards; the store is the source of truth.
    """
    return import_document(store, document)


@router.post("/migrate", response_model=ImportResult)
async def migrate_episodes(
    store: EpisodeStore = Depends(get_store),
    local_store: LocalEpisodeStore = Depends(get_local_store),
):
    """Copy the local cache store into the primary store."""
    if local_store is store:
        raise ValidationFailed("Primary store is the local store; nothing to migrate")
    return migrate_local(local_store, store)


# ==================== Media ====================


@router.post("/upload-image", response_model=UploadResponse)
async def upload_image(request: Request, media: MediaService = Depends(get_media_service)):
    """
    Upload a cover image.

    The body is the raw image; Content-Type names its format. Large images are
    recompressed before storage. Returns the public URL.
    """
    data = await request.body()
    url = media.upload_cover(data, request.headers.get("content-type"))
    return UploadResponse(url=url)
