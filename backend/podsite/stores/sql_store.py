"""
SQLAlchemy-backed episode store (primary backend).

Every operation runs in its own session scope; SQLAlchemy failures are logged
and re-raised as StoreError so that driver exceptions never leave this module.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from podsite.database import session_scope
from podsite.exceptions import StoreError
from podsite.models import Episode, FeaturedEpisode
from podsite.schemas.episode import EpisodeRecord, PlainTranscript
from podsite.stores.base import EpisodeStore


# ==================== Row Conversion ====================


def row_to_record(row: Episode) -> EpisodeRecord:
    """Convert a database row to an EpisodeRecord."""
    return EpisodeRecord(
        slug=row.slug,
        title=row.title,
        company=row.company,
        duration=row.duration,
        description=row.description,
        short_description=row.short_description,
        season=row.season,
        episode=row.episode,
        date=row.date,
        cover_image=row.cover_image or "",
        youtube_id=row.youtube_id,
        spotify_url=row.spotify_url,
        apple_podcasts_url=row.apple_podcasts_url,
        transcript=_load_transcript(row.transcript_kind, row.transcript),
        carve_outs=row.carve_outs,
        follow_ups=row.follow_ups,
        sponsors=row.sponsors,
    )


def record_to_columns(record: EpisodeRecord) -> dict:
    """Convert an EpisodeRecord to column values."""
    transcript_kind, transcript = _dump_transcript(record)
    return {
        "slug": record.slug,
        "title": record.title,
        "company": record.company,
        "duration": record.duration,
        "description": record.description,
        "short_description": record.short_description,
        "season": record.season,
        "episode": record.episode,
        "date": record.date,
        "cover_image": record.cover_image or None,
        "youtube_id": record.youtube_id,
        "spotify_url": record.spotify_url,
        "apple_podcasts_url": record.apple_podcasts_url,
        "transcript_kind": transcript_kind,
        "transcript": transcript,
        "carve_outs": _dump_list(record.carve_outs),
        "follow_ups": list(record.follow_ups) if record.follow_ups is not None else None,
        "sponsors": _dump_list(record.sponsors),
    }


def _dump_transcript(record: EpisodeRecord) -> tuple[Optional[str], object]:
    transcript = record.transcript
    if transcript is None:
        return None, None
    if isinstance(transcript, PlainTranscript):
        return "plain", transcript.text
    return "timed", [entry.model_dump() for entry in transcript.entries]


def _load_transcript(kind: Optional[str], payload: object) -> object:
    if kind == "plain" and isinstance(payload, str):
        return {"kind": "plain", "text": payload}
    if kind == "timed" and isinstance(payload, list):
        return {"kind": "timed", "entries": payload}
    return payload


def _dump_list(items: Optional[list]) -> Optional[list]:
    if items is None:
        return None
    return [item.model_dump() for item in items]


# ==================== Store ====================


class SqlEpisodeStore(EpisodeStore):
    """
    Episode store over the `episodes` and `featured_episodes` tables.

    Attributes:
        session_factory: SQLAlchemy sessionmaker owned by this store
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Database error during {action}: {e}")
            raise StoreError(f"Database error during {action}") from e

    # ==================== Reads ====================

    def _all_records(self) -> list[EpisodeRecord]:
        with self._session("list") as session:
            rows = session.scalars(select(Episode).order_by(Episode.id)).all()
            return [row_to_record(row) for row in rows]

    def _featured(self) -> list[str]:
        with self._session("list featured") as session:
            stmt = select(FeaturedEpisode.slug).order_by(FeaturedEpisode.position)
            return list(session.scalars(stmt).all())

    def _fetch(self, slug: str) -> Optional[EpisodeRecord]:
        with self._session("get") as session:
            row = session.scalars(select(Episode).where(Episode.slug == slug)).first()
            return row_to_record(row) if row else None

    # ==================== Writes ====================

    def _insert(self, record: EpisodeRecord) -> None:
        with self._session("create") as session:
            session.add(Episode(**record_to_columns(record)))

    def _replace(self, record: EpisodeRecord) -> None:
        with self._session("update") as session:
            row = session.scalars(select(Episode).where(Episode.slug == record.slug)).one()
            for column, value in record_to_columns(record).items():
                setattr(row, column, value)

    def _upsert(self, record: EpisodeRecord) -> None:
        with self._session(f"upsert {record.slug}") as session:
            row = session.scalars(select(Episode).where(Episode.slug == record.slug)).first()
            if row is None:
                session.add(Episode(**record_to_columns(record)))
                return
            for column, value in record_to_columns(record).items():
                setattr(row, column, value)

    def _remove(self, slug: str) -> None:
        with self._session("delete") as session:
            session.execute(delete(FeaturedEpisode).where(FeaturedEpisode.slug == slug))
            session.execute(delete(Episode).where(Episode.slug == slug))

    def _write_featured(self, slugs: list[str]) -> None:
        with self._session("write featured") as session:
            session.execute(delete(FeaturedEpisode))
            for position, slug in enumerate(slugs):
                session.add(FeaturedEpisode(slug=slug, position=position))
