"""Service layer for ride rosters.

Rides live under ``groups/{groupId}/rides``. Roster changes are done as
read-modify-write transactions on the ride document so concurrent joins and
leaves are serialized by Firestore and none are lost.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from firebase_admin import firestore

from campusrides.core.constants import GROUPS_COLLECTION, RIDES_SUBCOLLECTION
from campusrides.core.transactions import run_transaction
from campusrides.core.types import Failure, Result, Success

from .utils import is_participant, rider_ids

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from .models import Ride, Rider

logger = logging.getLogger(__name__)

RIDE_NOT_FOUND = "Ride does not exist!"


class RideService:
    """Service class for ride-related operations."""

    @staticmethod
    def _rides(db: Client, group_id: str) -> CollectionReference:
        return (
            db.collection(GROUPS_COLLECTION)
            .document(group_id)
            .collection(RIDES_SUBCOLLECTION)
        )

    @staticmethod
    def _ride_ref(db: Client, group_id: str, ride_id: str) -> DocumentReference:
        return RideService._rides(db, group_id).document(ride_id)

    @staticmethod
    def create_ride(  # noqa: PLR0913
        db: Client,
        group_id: str,
        driver: Rider,
        vibe: str,
        car_id: str,
        max_riders: int,
        riders: Optional[list[Rider]] = None,
        start_date_time: Optional[str] = None,
    ) -> Result:
        """Offer a new ride in a group.

        Driver membership and capacity are not checked here.
        """
        ride_data = {
            "groupId": group_id,
            "driver": driver,
            "vibe": vibe,
            "carId": car_id,
            "maxRiders": max_riders,
            "riders": list(riders or []),
            "startDateTime": start_date_time,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            _, ride_ref = RideService._rides(db, group_id).add(ride_data)
        except Exception as e:
            logger.error(f"Error creating ride in group {group_id}: {e}")
            return Failure.store()

        logger.info(f"Ride {ride_ref.id} created in group {group_id}")
        return Success("Ride added!", id=ride_ref.id)

    @staticmethod
    def _join_ride_transaction(
        transaction: Transaction, ride_ref: DocumentReference, rider: Rider
    ) -> Result:
        """Append a rider to the roster unless they already drive or ride."""
        snapshot = ride_ref.get(transaction=transaction)
        if not snapshot.exists:
            return Failure.not_found(RIDE_NOT_FOUND)

        ride = snapshot.to_dict() or {}
        if is_participant(ride, rider["id"]):
            return Failure.conflict("You are already in this ride!")

        # Capacity is checked by the caller before joining.
        riders = list(ride.get("riders") or [])
        riders.append(dict(rider))
        transaction.update(ride_ref, {"riders": riders})
        return Success("Joined ride!")

    @staticmethod
    def join_ride(db: Client, group_id: str, ride_id: str, rider: Rider) -> Result:
        """Add a rider to a ride."""
        if not rider or not rider.get("id"):
            return Failure.validation("Error joining ride!")

        return RideService._run(
            db,
            f"joining ride {ride_id}",
            RideService._join_ride_transaction,
            RideService._ride_ref(db, group_id, ride_id),
            rider,
        )

    @staticmethod
    def _leave_ride_transaction(
        transaction: Transaction, ride_ref: DocumentReference, user_id: str
    ) -> Result:
        """Remove a rider from the roster.

        The driver is never on the roster, so a driver cannot leave this way.
        """
        snapshot = ride_ref.get(transaction=transaction)
        if not snapshot.exists:
            return Failure.not_found(RIDE_NOT_FOUND)

        ride = snapshot.to_dict() or {}
        if user_id not in rider_ids(ride):
            return Failure.conflict("You are not in this ride!")

        riders = [r for r in ride.get("riders") or [] if r.get("id") != user_id]
        transaction.update(ride_ref, {"riders": riders})
        return Success("Left ride!")

    @staticmethod
    def leave_ride(db: Client, ride_id: str, group_id: str, user_id: str) -> Result:
        """Remove a user from a ride's riders."""
        return RideService._run(
            db,
            f"leaving ride {ride_id}",
            RideService._leave_ride_transaction,
            RideService._ride_ref(db, group_id, ride_id),
            user_id,
        )

    @staticmethod
    def _edit_ride_transaction(
        transaction: Transaction,
        ride_ref: DocumentReference,
        updates: dict[str, Any],
    ) -> Result:
        snapshot = ride_ref.get(transaction=transaction)
        if not snapshot.exists:
            return Failure.not_found(RIDE_NOT_FOUND)

        transaction.update(ride_ref, updates)
        return Success("Ride updated!")

    @staticmethod
    def edit_ride(  # noqa: PLR0913
        db: Client,
        group_id: str,
        ride_id: str,
        car_id: str,
        max_riders: int,
        vibe: str,
        start_date_time: Optional[str],
    ) -> Result:
        """Overwrite a ride's car, capacity, vibe and departure time."""
        updates = {
            "carId": car_id,
            "maxRiders": max_riders,
            "vibe": vibe,
            "startDateTime": start_date_time,
        }
        return RideService._run(
            db,
            f"editing ride {ride_id}",
            RideService._edit_ride_transaction,
            RideService._ride_ref(db, group_id, ride_id),
            updates,
        )

    @staticmethod
    def delete_ride(db: Client, ride_id: str, group_id: str) -> Result:
        """Delete a ride. Ownership is checked by the caller."""
        try:
            RideService._ride_ref(db, group_id, ride_id).delete()
        except Exception as e:
            logger.error(f"Error deleting ride {ride_id}: {e}")
            return Failure.store()
        return Success("Ride deleted!")

    @staticmethod
    def _run(
        db: Client, action: str, body: Callable[..., Result], *args: Any
    ) -> Result:
        """Run a roster transaction and turn store errors into failures."""
        try:
            result = run_transaction(db, body, *args)
        except Exception as e:
            logger.error(f"Error {action}: {e}")
            return Failure.store()
        if not result.ok:
            logger.info(f"Rejected {action}: {result.message}")
        return result

    @staticmethod
    def get_ride(db: Client, group_id: str, ride_id: str) -> Result:
        """Fetch a single ride."""
        try:
            snapshot = RideService._ride_ref(db, group_id, ride_id).get()
        except Exception as e:
            logger.error(f"Error fetching ride {ride_id}: {e}")
            return Failure.store()
        if not snapshot.exists:
            return Failure.not_found(RIDE_NOT_FOUND)
        ride: Ride = {**snapshot.to_dict(), "id": snapshot.id}
        return Success("Ride found.", id=snapshot.id, data=ride)

    @staticmethod
    def _rides_query(db: Client, group_id: str) -> Any:
        return RideService._rides(db, group_id).order_by(
            "createdAt", direction=firestore.Query.DESCENDING
        )

    @staticmethod
    def get_rides_by_group_id(db: Client, group_id: str) -> list[Ride]:
        """Return a group's rides, newest first."""
        return [
            {**doc.to_dict(), "id": doc.id}
            for doc in RideService._rides_query(db, group_id).stream()
        ]

    @staticmethod
    def watch_group_rides(
        db: Client, group_id: str, callback: Callable[[list[Ride]], None]
    ) -> Callable[[], None]:
        """Call ``callback`` with the group's rides now and on every change.

        Returns the function that stops the subscription.
        """

        def on_snapshot(docs: list[Any], changes: Any, read_time: Any) -> None:
            callback([{**doc.to_dict(), "id": doc.id} for doc in docs])

        watch = RideService._rides_query(db, group_id).on_snapshot(on_snapshot)
        return watch.unsubscribe

    @staticmethod
    def check_user_in_rides(db: Client, user_id: str, group_id: str) -> bool:
        """Check whether a user already drives or rides in any ride of a group."""
        for doc in RideService._rides(db, group_id).stream():
            if is_participant(doc.to_dict() or {}, user_id):
                return True
        return False
