"""
Episode date parsing.

Episode dates are free-form strings entered by an operator: either ISO
("2024-06-01", "2024-06-01T10:00:00Z") or human readable ("June 1, 2024").
"""

from datetime import datetime, timezone
from typing import Optional

# Human readable formats seen in the catalog, tried in order
HUMAN_DATE_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%B %Y",
    "%b %Y",
)


def parse_episode_date(value: Optional[str]) -> Optional[float]:
    """
    Parse an episode date into a POSIX timestamp.

    Naive dates are interpreted as UTC.

    Args:
        value: Date string as stored on the episode

    Returns:
        Optional[float]: Timestamp in seconds, or None when unparseable
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    parsed = _parse_iso(text)
    if parsed is None:
        for fmt in HUMAN_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _parse_iso(text: str) -> Optional[datetime]:
    # fromisoformat on older interpreters rejects the trailing "Z"
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
