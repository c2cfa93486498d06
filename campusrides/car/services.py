"""Service layer for cars."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore

from campusrides.core.constants import CARS_COLLECTION
from campusrides.core.storage import upload_image
from campusrides.core.types import Failure, Result, Success

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

    from .models import Car

logger = logging.getLogger(__name__)

CAR_NOT_FOUND = "Car does not exist!"


class CarService:
    """Service class for the cars drivers offer rides in."""

    @staticmethod
    def get_cars_by_user_id(db: Client, user_id: str) -> list[dict[str, Any]]:
        """Return ``{id, name, maxCapacity}`` for each car a user owns."""
        query = db.collection(CARS_COLLECTION).where(
            filter=firestore.FieldFilter("ownerId", "==", user_id)
        )
        try:
            docs = list(query.stream())
        except Exception as e:
            logger.error(f"Failed to fetch cars for {user_id}: {e}")
            return []

        cars = []
        for doc in docs:
            data = doc.to_dict() or {}
            cars.append(
                {
                    "id": doc.id,
                    "name": data.get("carName"),
                    "maxCapacity": data.get("maxCapacity"),
                }
            )
        return cars

    @staticmethod
    def get_car(db: Client, car_id: str) -> Result:
        """Fetch a single car."""
        try:
            car_doc = db.collection(CARS_COLLECTION).document(car_id).get()
        except Exception as e:
            logger.error(f"Error fetching car {car_id}: {e}")
            return Failure.store()
        if not car_doc.exists:
            return Failure.not_found(CAR_NOT_FOUND)
        car: Car = {**car_doc.to_dict(), "id": car_doc.id}
        return Success("Car found.", id=car_doc.id, data=car)

    @staticmethod
    def _owned_car(db: Client, car_id: str, user_id: str) -> Result:
        result = CarService.get_car(db, car_id)
        if result.ok and result.data.get("ownerId") != user_id:
            return Failure.forbidden("You can only change your own cars.")
        return result

    @staticmethod
    def _upload_photo(bucket: Any, owner_id: str, image: Optional[FileStorage]) -> list:
        if not image or bucket is None:
            return []
        return [upload_image(bucket, f"cars/{owner_id}", image)]

    @staticmethod
    def create_car(  # noqa: PLR0913
        db: Client,
        owner_id: str,
        car_name: str,
        max_capacity: int,
        model: str = "",
        car_number: str = "",
        bucket: Any = None,
        image: Optional[FileStorage] = None,
    ) -> Result:
        """Register a car for a driver."""
        if not car_name:
            return Failure.validation("Car name is required.")
        if not max_capacity or max_capacity < 1:
            return Failure.validation("Capacity must be at least 1.")

        try:
            car_data = {
                "carName": car_name,
                "model": model,
                "carNumber": car_number,
                "maxCapacity": max_capacity,
                "imageURLs": CarService._upload_photo(bucket, owner_id, image),
                "ownerId": owner_id,
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
            _, car_ref = db.collection(CARS_COLLECTION).add(car_data)
        except Exception as e:
            logger.error(f"Error creating car for {owner_id}: {e}")
            return Failure.store()

        logger.info(f"Car {car_ref.id} added by {owner_id}")
        return Success("Car added successfully!", id=car_ref.id)

    @staticmethod
    def update_car(  # noqa: PLR0913
        db: Client,
        car_id: str,
        user_id: str,
        car_name: str,
        max_capacity: int,
        model: str = "",
        car_number: str = "",
        bucket: Any = None,
        image: Optional[FileStorage] = None,
    ) -> Result:
        """Change a car the user owns. A new photo replaces the old ones."""
        result = CarService._owned_car(db, car_id, user_id)
        if not result.ok:
            return result

        update_data: dict[str, Any] = {
            "carName": car_name,
            "model": model,
            "carNumber": car_number,
            "maxCapacity": max_capacity,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            photos = CarService._upload_photo(bucket, user_id, image)
            if photos:
                update_data["imageURLs"] = photos
            db.collection(CARS_COLLECTION).document(car_id).update(update_data)
        except Exception as e:
            logger.error(f"Error updating car {car_id}: {e}")
            return Failure.store()
        return Success("Car updated successfully!", id=car_id)

    @staticmethod
    def delete_car(db: Client, car_id: str, user_id: str) -> Result:
        """Delete a car the user owns.

        Rides already offered in the car keep their ``carId``.
        """
        result = CarService._owned_car(db, car_id, user_id)
        if not result.ok:
            return result
        try:
            db.collection(CARS_COLLECTION).document(car_id).delete()
        except Exception as e:
            logger.error(f"Error deleting car {car_id}: {e}")
            return Failure.store()
        logger.info(f"Car {car_id} deleted by {user_id}")
        return Success("Car deleted successfully")
