"""
Timestamp helpers.

All persisted timestamps are ISO-8601 strings in UTC.
"""

from datetime import datetime, timezone
from typing import Any

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a persisted timestamp into an aware datetime.

    Accepts the trailing "Z" written by browsers. Naive values are read as UTC.
    Unparsable, missing or non-string values map to the epoch so they sort first.
    """
    if not value or not isinstance(value, str):
        return EPOCH

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except (TypeError, ValueError):
        return EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
