"""Utility functions for the ride blueprint."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from campusrides.core.constants import RIDE_FULL, RIDE_HAS_CAPACITY
from campusrides.core.dates import parse_iso_datetime


def rider_ids(ride: dict[str, Any]) -> list[str]:
    """Return the ids on a ride's roster, in order."""
    return [r.get("id") for r in ride.get("riders") or []]


def is_participant(ride: dict[str, Any], user_id: str) -> bool:
    """Check whether a user drives or rides in a ride."""
    driver = ride.get("driver") or {}
    return driver.get("id") == user_id or user_id in rider_ids(ride)


def ride_state(ride: dict[str, Any]) -> str:
    """Return whether a ride still has seats or is full."""
    riders = ride.get("riders") or []
    max_riders = int(ride.get("maxRiders") or 0)
    if len(riders) >= max_riders:
        return RIDE_FULL
    return RIDE_HAS_CAPACITY


def ride_has_capacity(ride: dict[str, Any]) -> bool:
    """Check whether another rider fits in the ride."""
    return ride_state(ride) == RIDE_HAS_CAPACITY


def parse_start_date_time(value: Any) -> Optional[datetime.datetime]:
    """Parse a ride's departure time; absent or invalid values give None."""
    return parse_iso_datetime(value)
