"""Service layer for a rider's bookings."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from campusrides.core.constants import (
    BOOKING_CONFIRMED,
    BOOKINGS_COLLECTION,
    CURRENT_RIDE_STATUSES,
    PREVIOUS_RIDE_STATUSES,
    RIDES_COLLECTION,
)
from campusrides.core.dates import as_aware, parse_iso_datetime, utcnow

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from .models import Booking

logger = logging.getLogger(__name__)


class BookingService:
    """Service class for booking reads."""

    @staticmethod
    def get_bookings_for_rider(db: Client, rider_id: str) -> list[Booking]:
        """Load a rider's bookings, joining the ride of confirmed ones."""
        query = db.collection(BOOKINGS_COLLECTION).where(
            filter=firestore.FieldFilter("riderId", "==", rider_id)
        )
        return [
            BookingService._attach_ride(db, {**doc.to_dict(), "id": doc.id})
            for doc in query.stream()
        ]

    @staticmethod
    def _attach_ride(db: Client, booking: dict[str, Any]) -> Booking:
        """Set ``booking["ride"]`` to the ride data, or None if not joinable."""
        booking["ride"] = None
        ride_id = booking.get("rideId")
        if booking.get("status") != BOOKING_CONFIRMED or not ride_id:
            return booking

        try:
            ride_doc = db.collection(RIDES_COLLECTION).document(ride_id).get()
        except Exception as e:
            logger.error(f"Error fetching ride for booking {booking['id']}: {e}")
            return booking

        if ride_doc.exists:
            booking["ride"] = ride_doc.to_dict()
        return booking

    @staticmethod
    def partition_bookings(
        bookings: list[Booking], now: Optional[datetime.datetime] = None
    ) -> tuple[list[Booking], list[Booking]]:
        """Split bookings into current and previous.

        Bookings without a loaded ride are left out of both lists. A ride with
        no readable end time only counts as previous when it is finished or
        cancelled.
        """
        now = as_aware(now) if now else utcnow()
        current = []
        previous = []
        for booking in bookings:
            ride = booking.get("ride")
            if not ride:
                continue
            status = ride.get("status")
            end = parse_iso_datetime(ride.get("endDateTime"))

            if status in PREVIOUS_RIDE_STATUSES or (end is not None and end < now):
                previous.append(booking)
            if status in CURRENT_RIDE_STATUSES and end is not None and end >= now:
                current.append(booking)
        return current, previous
