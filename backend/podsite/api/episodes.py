"""
Public Episodes API Routes

Read-only catalog endpoints, no authentication.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from podsite.api.deps import get_reader
from podsite.config import PAGE_SIZE
from podsite.schemas.catalog import EpisodeCatalogResponse, EpisodeSearchResponse, ShowcaseResponse
from podsite.schemas.episode import EpisodeDetailResponse
from podsite.services.catalog import (
    filter_episodes,
    paginate,
    select_showcase,
    sort_by_date_descending,
    to_card,
    total_pages,
)
from podsite.stores import FallbackReader


router = APIRouter()


@router.get("/episodes", response_model=EpisodeCatalogResponse, response_model_exclude_none=True)
async def list_episodes(reader: FallbackReader = Depends(get_reader)):
    """
    List all episodes (newest first) with the featured slug list.
    """
    read = reader.list_episodes()
    return EpisodeCatalogResponse(
        episodes=sort_by_date_descending(read.catalog.episodes),
        featured_slugs=read.catalog.featured_slugs,
        stale=read.stale,
    )


@router.get("/episodes/search", response_model=EpisodeSearchResponse, response_model_exclude_none=True)
async def search_episodes(
    q: Optional[str] = Query(None, description="Search text (title, company, description, duration)"),
    page: int = Query(1, ge=1, description="Page number"),
    reader: FallbackReader = Depends(get_reader),
):
    """
    Search the catalog, one page at a time.

    Out-of-range pages return an empty item list.
    """
    read = reader.list_episodes()
    results = filter_episodes(sort_by_date_descending(read.catalog.episodes), q)
    items = paginate(results, page, PAGE_SIZE)
    return EpisodeSearchResponse(
        query=q or "",
        page=page,
        page_size=PAGE_SIZE,
        total=len(results),
        total_pages=total_pages(len(results), PAGE_SIZE),
        items=items,
        cards=[to_card(episode) for episode in items],
        stale=read.stale,
    )


@router.get("/episodes/featured", response_model=ShowcaseResponse, response_model_exclude_none=True)
async def featured_episodes(reader: FallbackReader = Depends(get_reader)):
    """Episodes for the home page featured grid."""
    read = reader.list_episodes()
    showcase = select_showcase(sort_by_date_descending(read.catalog.episodes), read.catalog.featured_slugs)
    return ShowcaseResponse(
        episodes=showcase,
        cards=[to_card(episode) for episode in showcase],
        stale=read.stale,
    )


@router.get("/episodes/{slug}", response_model=EpisodeDetailResponse, response_model_exclude_none=True)
async def get_episode(slug: str, reader: FallbackReader = Depends(get_reader)):
    """
    Get one episode by slug.

    Returns 404 when no episode has that slug.
    """
    return EpisodeDetailResponse(episode=reader.get_by_slug(slug).episode)
