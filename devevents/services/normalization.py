"""Shared string, date and time normalization for event and booking records."""

import re
from datetime import datetime, timezone

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_TIME_RE = re.compile(r"([0-9]{1,2}):([0-9]{1,2})")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Accepted non-ISO date inputs
DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

INVALID_DATE_MESSAGE = "Invalid date format"
INVALID_TIME_MESSAGE = "Invalid time format"


def trim(value):
    if isinstance(value, str):
        return value.strip()
    return value


def slugify(title: str) -> str:
    """
    Derive a URL slug from a title.

    "React Summit 2025" -> "react-summit-2025". A title without any
    alphanumeric characters gives an empty slug.
    """
    return _NON_ALNUM_RE.sub("-", title.strip().lower()).strip("-")


def normalize_date(value) -> str:
    """Convert a supported date representation to ``YYYY-MM-DD``."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(INVALID_DATE_MESSAGE)

    raw = value.strip()
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        pass
    else:
        # Offset date-times are stored by their UTC calendar date
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date().isoformat()

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date().isoformat()
        except ValueError:
            continue

    raise ValueError(INVALID_DATE_MESSAGE)


def normalize_time(value) -> str:
    """Convert ``H:MM``/``HH:M`` style 24-hour times to zero-padded ``HH:MM``."""
    if not isinstance(value, str):
        raise ValueError(INVALID_TIME_MESSAGE)

    match = _TIME_RE.fullmatch(value.strip())
    if not match:
        raise ValueError(INVALID_TIME_MESSAGE)

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(INVALID_TIME_MESSAGE)

    return f"{hour:02d}:{minute:02d}"


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return _EMAIL_RE.fullmatch(value) is not None
