"""
Catalog Schemas

Pydantic models for public catalog responses and featured-list management.
"""
from typing import Optional

from pydantic import Field

from podsite.schemas.common import CamelModel
from podsite.schemas.episode import EpisodeRecord


class EpisodeCatalogResponse(CamelModel):
    """All episodes plus the featured slug list"""

    episodes: list[EpisodeRecord]
    featured_slugs: list[str]
    stale: bool = Field(False, description="True when served from the local fallback cache")


class EpisodeCard(CamelModel):
    """Display-ready summary of one episode for grids and search results"""

    slug: str
    title: str
    company: str
    duration: str
    date: str
    summary: str = Field(..., description="Short description, else the full description")
    season_label: str = Field(..., description="'Season 13', or a label such as 'Special'")
    episode_label: str = Field("", description="'Episode 4', empty for specials")
    cover_image: str = Field(..., description="Cover URL, or the placeholder image")


class EpisodeSearchResponse(CamelModel):
    """One page of search results"""

    query: str = ""
    page: int
    page_size: int
    total: int
    total_pages: int
    items: list[EpisodeRecord]
    cards: list[EpisodeCard] = Field(default_factory=list, description="Display summaries of items, same order")
    stale: bool = False


class ShowcaseResponse(CamelModel):
    """Home page featured grid"""

    episodes: list[EpisodeRecord]
    cards: list[EpisodeCard] = Field(default_factory=list, description="Display summaries of episodes, same order")
    stale: bool = False


class FeaturedToggleRequest(CamelModel):
    """Toggle featured status request"""

    slug: Optional[str] = None


class FeaturedToggleResponse(CamelModel):
    """Toggle featured status response"""

    success: bool = True
    featured_slugs: list[str]
