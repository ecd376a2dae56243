"""
Episode Models

Represents a published podcast episode and the ordered featured list.
"""
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from podsite.models.base import Base, TimestampMixin


class Episode(Base, TimestampMixin):
    """
    Represents a podcast episode row.

    Attributes:
        id: Primary key
        slug: Public URL key (unique)
        title / company / duration / description: Required display fields
        short_description: Optional compact blurb
        season: Season number or label ("Special", "ACQ2")
        episode: Episode number, NULL for specials
        date: Free-form publication date
        cover_image: Cover image URL
        youtube_id / spotify_url / apple_podcasts_url: External media links
        transcript_kind: 'plain', 'timed' or NULL
        transcript: JSON payload matching transcript_kind (string or entry list)
        carve_outs / follow_ups / sponsors: Optional JSON sub-sections
    """

    __tablename__ = "episodes"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Display fields
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    season: Mapped[str] = mapped_column(String(64), nullable=False)
    episode: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    date: Mapped[str] = mapped_column(String(64), nullable=False)
    cover_image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # External media links
    youtube_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    spotify_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    apple_podcasts_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # Long-form content
    transcript_kind: Mapped[Optional[str]] = mapped_column(
        String(16), nullable=True, doc="'plain' or 'timed'"
    )
    transcript: Mapped[Any] = mapped_column(JSON(none_as_null=True), nullable=True)
    carve_outs: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True), nullable=True)
    follow_ups: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True), nullable=True)
    sponsors: Mapped[Optional[list]] = mapped_column(JSON(none_as_null=True), nullable=True)

    # Relationships
    featured = relationship(
        "FeaturedEpisode",
        back_populates="episode",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Episode(id={self.id}, slug='{self.slug}')>"


class FeaturedEpisode(Base, TimestampMixin):
    """
    One slot in the featured list.

    Attributes:
        slug: Featured episode slug (FK, cascades on delete)
        position: 0-based display order, 0 is the most recently featured
    """

    __tablename__ = "featured_episodes"

    slug: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("episodes.slug", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    episode = relationship("Episode", back_populates="featured")

    __table_args__ = (
        Index("idx_featured_episodes_position", "position"),
    )

    def __repr__(self) -> str:
        return f"<FeaturedEpisode(slug='{self.slug}', position={self.position})>"
