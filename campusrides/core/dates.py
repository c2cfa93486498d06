"""Date parsing shared by rides and bookings."""

from __future__ import annotations

import datetime
from typing import Any, Optional


def utcnow() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(datetime.timezone.utc)


def as_aware(value: datetime.datetime) -> datetime.datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def parse_iso_datetime(value: Any) -> Optional[datetime.datetime]:
    """Parse an ISO-8601 string or Firestore timestamp into an aware datetime.

    Returns None for missing or unparseable values.
    """
    if isinstance(value, datetime.datetime):
        return as_aware(value)
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_aware(datetime.datetime.fromisoformat(text))
    except ValueError:
        return None
