"""Data models for the booking blueprint."""

from __future__ import annotations

from typing import Any, Optional

from campusrides.core.types import FirestoreDocument


class Booking(FirestoreDocument, total=False):
    """A booking document joined with its ride when confirmed."""

    riderId: str
    rideId: str
    status: str
    seatsBooked: int
    bookingTime: Any
    ride: Optional[dict[str, Any]]
