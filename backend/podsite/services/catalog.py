"""
Catalog Service

Search, ordering, pagination and display helpers for the public episode
catalog. Everything here is a pure function over an in-memory list of records.
"""
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from podsite.config import MAX_FEATURED, PAGE_SIZE, SHOWCASE_MIN
from podsite.schemas.catalog import EpisodeCard
from podsite.schemas.episode import EpisodeRecord
from podsite.utils.date_utils import parse_episode_date

PLACEHOLDER_COVER = "/placeholder.svg"

SEARCH_FIELDS = ("title", "company", "description", "duration")


# ==================== Search / Pagination ====================


def filter_episodes(episodes: Sequence[EpisodeRecord], query: Optional[str]) -> list[EpisodeRecord]:
    """
    Case-insensitive substring search over title, company, description and duration.

    A blank query returns the input unchanged (same order, same elements).
    """
    if not query or not query.strip():
        return list(episodes)

    needle = query.lower()
    return [
        episode for episode in episodes
        if any(needle in getattr(episode, name).lower() for name in SEARCH_FIELDS)
    ]


def paginate(episodes: Sequence[EpisodeRecord], page: int, page_size: int = PAGE_SIZE) -> list[EpisodeRecord]:
    """
    Return the 1-indexed page slice [(page-1)*page_size, page*page_size).

    Pages outside the range yield an empty list.
    """
    if page < 1 or page_size < 1:
        return []
    start = (page - 1) * page_size
    return list(episodes[start:start + page_size])


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def sort_by_date_descending(episodes: Sequence[EpisodeRecord]) -> list[EpisodeRecord]:
    """
    Newest first by parsed date. Stable: equal dates keep their input order.
    Unparseable dates sort after every dated episode.
    """
    def sort_key(episode: EpisodeRecord) -> tuple[int, float]:
        timestamp = parse_episode_date(episode.date)
        if timestamp is None:
            return (1, 0.0)
        return (0, -timestamp)

    return sorted(episodes, key=sort_key)


@dataclass
class CatalogCursor:
    """
    Search box + pager state for the episodes page.

    Changing the query resets the page to 1.
    """

    episodes: list[EpisodeRecord] = field(default_factory=list)
    page_size: int = PAGE_SIZE
    query: str = ""
    page: int = 1

    def search(self, query: str) -> None:
        if query != self.query:
            self.query = query
            self.page = 1

    def go_to(self, page: int) -> None:
        self.page = max(1, min(page, max(self.total_pages, 1)))

    @property
    def results(self) -> list[EpisodeRecord]:
        return filter_episodes(self.episodes, self.query)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.results), self.page_size)

    @property
    def items(self) -> list[EpisodeRecord]:
        return paginate(self.results, self.page, self.page_size)


# ==================== Featured Showcase ====================


def select_showcase(
    episodes: Sequence[EpisodeRecord],
    featured_slugs: Sequence[str],
    minimum: int = SHOWCASE_MIN,
    maximum: int = MAX_FEATURED,
) -> list[EpisodeRecord]:
    """
    Pick the episodes for the home page grid.

    Featured slugs resolve in order (unknown slugs are skipped). When fewer than
    `minimum` resolve, the list is padded with non-featured episodes in catalog
    order. The result is capped at `maximum`.
    """
    by_slug = {episode.slug: episode for episode in episodes}
    showcase = [by_slug[slug] for slug in featured_slugs if slug in by_slug]

    if len(showcase) < minimum:
        featured = set(featured_slugs)
        padding = [episode for episode in episodes if episode.slug not in featured]
        showcase.extend(padding[:minimum - len(showcase)])

    return showcase[:maximum]


# ==================== Display Helpers ====================


def compact_description(episode: EpisodeRecord) -> str:
    """Short description when present, else the full description."""
    return episode.short_description or episode.description


def display_season(episode: EpisodeRecord) -> str:
    """'Season 13' for numeric seasons; labels such as 'Special' pass through."""
    season = episode.season.strip()
    if season.isdigit():
        return f"Season {season}"
    return season


def display_episode_number(episode: EpisodeRecord) -> str:
    """'Episode 4' for numbered episodes, empty for specials."""
    return f"Episode {episode.episode}" if episode.episode else ""


def cover_image_or_placeholder(episode: EpisodeRecord) -> str:
    return episode.cover_image or PLACEHOLDER_COVER


def to_card(episode: EpisodeRecord) -> EpisodeCard:
    """Bundle the display helpers into one card for the episode grid."""
    return EpisodeCard(
        slug=episode.slug,
        title=episode.title,
        company=episode.company,
        duration=episode.duration,
        date=episode.date,
        summary=compact_description(episode),
        season_label=display_season(episode),
        episode_label=display_episode_number(episode),
        cover_image=cover_image_or_placeholder(episode),
    )
