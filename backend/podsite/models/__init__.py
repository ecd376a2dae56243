"""
Models Module

Exports all ORM models for the Podsite application.
"""

from podsite.models.base import Base, TimestampMixin

from podsite.models.episode import Episode, FeaturedEpisode

__all__ = [
    "Base",
    "TimestampMixin",
    "Episode",
    "FeaturedEpisode",
]
