"""
Episode Schemas

Pydantic models for the canonical episode record and its sub-structures.
"""
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_serializer, field_validator

from podsite.schemas.common import CamelModel


# ==================== Sub-structures ====================


class TranscriptEntry(CamelModel):
    """One timestamped transcript line"""

    time: str = Field(..., description="Display timestamp, e.g. 01:02:03")
    text: str


class CarveOut(CamelModel):
    """Per-host carve-out recommendations"""

    person: str
    items: list[str] = Field(default_factory=list)


class Sponsor(CamelModel):
    """Sponsor block"""

    name: str
    description: str = ""


class PlainTranscript(BaseModel):
    """Plain text transcript, paragraphs separated by a blank line."""

    kind: Literal["plain"] = "plain"
    text: str

    def paragraphs(self) -> list[str]:
        return [p.strip() for p in self.text.split("\n\n") if p.strip()]


class TimedTranscript(BaseModel):
    """Timestamped transcript."""

    kind: Literal["timed"] = "timed"
    entries: list[TranscriptEntry]

    def paragraphs(self) -> list[str]:
        return [entry.text for entry in self.entries]


Transcript = Union[PlainTranscript, TimedTranscript]


def coerce_transcript(value: Any) -> Optional[Transcript]:
    """
    Convert any accepted transcript representation into the tagged variant.

    Accepted inputs:
    - None
    - str (plain mode; blank collapses to None)
    - list of {time, text} mappings (timed mode; empty collapses to None)
    - {"kind": "plain", "text": ...} / {"kind": "timed", "entries": [...]}
    - an existing PlainTranscript / TimedTranscript

    Raises:
        ValueError: For any other shape
    """
    if value is None:
        return None

    if isinstance(value, PlainTranscript):
        return coerce_transcript(value.text)
    if isinstance(value, TimedTranscript):
        return value if value.entries else None

    if isinstance(value, str):
        text = value.strip()
        return PlainTranscript(text=text) if text else None

    if isinstance(value, list):
        if not value:
            return None
        entries = [
            entry if isinstance(entry, TranscriptEntry) else TranscriptEntry.model_validate(entry)
            for entry in value
        ]
        return TimedTranscript(entries=entries)

    if isinstance(value, dict) and "kind" in value:
        if value["kind"] == "plain":
            return coerce_transcript(value.get("text"))
        if value["kind"] == "timed":
            return coerce_transcript(value.get("entries") or [])

    raise ValueError("transcript must be a string or a list of {time, text} entries")


# ==================== Episode Record ====================


class EpisodeRecord(CamelModel):
    """
    Canonical podcast episode.

    `slug` may be blank on input; the store derives it from the title on create.
    `transcript` holds exactly one representation (plain or timed) or None.
    """

    slug: str = Field("", description="URL-safe unique key")
    title: str = Field(..., min_length=1)
    company: str
    duration: str
    description: str
    short_description: Optional[str] = Field(None, description="Compact list blurb")
    season: str = Field(..., description="Season number or a label such as 'Special'")
    episode: Optional[str] = Field(None, description="Episode number, None for specials")
    date: str
    cover_image: str = ""
    youtube_id: Optional[str] = None
    spotify_url: Optional[str] = None
    apple_podcasts_url: Optional[str] = None
    transcript: Optional[Transcript] = None
    carve_outs: Optional[list[CarveOut]] = None
    follow_ups: Optional[list[str]] = None
    sponsors: Optional[list[Sponsor]] = None

    @field_validator("slug", "cover_image", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("slug", "title")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title drives slug derivation, so it cannot be blank."""
        if not v:
            raise ValueError("title cannot be blank")
        return v

    @field_validator("season", mode="before")
    @classmethod
    def season_to_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @field_validator("episode", mode="before")
    @classmethod
    def episode_to_str(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @field_validator(
        "short_description", "youtube_id", "spotify_url", "apple_podcasts_url", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("transcript", mode="before")
    @classmethod
    def normalize_transcript(cls, v: Any) -> Optional[Transcript]:
        return coerce_transcript(v)

    @field_serializer("transcript")
    def serialize_transcript(self, transcript: Optional[Transcript]) -> Any:
        """Wire format keeps the legacy shape: a string or a list of entries."""
        if transcript is None:
            return None
        if isinstance(transcript, PlainTranscript):
            return transcript.text
        return [entry.model_dump() for entry in transcript.entries]


class EpisodeDetailResponse(CamelModel):
    """Single episode response"""

    episode: EpisodeRecord


class EpisodeMutationResponse(CamelModel):
    """Create / update response"""

    success: bool = True
    episode: EpisodeRecord


class SuccessResponse(CamelModel):
    """Generic acknowledgement"""

    success: bool = True
