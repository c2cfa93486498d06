"""Service layer for user profiles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from campusrides.core.constants import PROFILE_FIELDS, USERS_COLLECTION
from campusrides.core.dates import utcnow
from campusrides.core.storage import upload_image
from campusrides.core.types import Failure, Result, Success

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

    from .models import User

logger = logging.getLogger(__name__)


class UserService:
    """Service class for user profiles."""

    @staticmethod
    def get_user_by_id(db: Client, user_id: str) -> Result:
        """Fetch a user profile."""
        try:
            user_doc = db.collection(USERS_COLLECTION).document(user_id).get()
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            return Failure.store(f"Error: {e}")

        if not user_doc.exists:
            return Failure.not_found("User doesn't exist!")

        user: User = {**user_doc.to_dict(), "id": user_doc.id}
        return Success("User found.", id=user_doc.id, data=user)

    @staticmethod
    def create_or_update_profile(
        db: Client,
        user_id: str,
        data: dict[str, Any],
        bucket: Any = None,
        picture: Optional[FileStorage] = None,
    ) -> Result:
        """Create a user's profile, or merge new values into the existing one.

        Only profile fields are written; keys with a None value are left
        alone so a partial update never blanks a stored field.
        """
        profile: dict[str, Any] = {
            key: value
            for key, value in data.items()
            if key in PROFILE_FIELDS and value is not None
        }
        now = utcnow().isoformat()
        user_ref = db.collection(USERS_COLLECTION).document(user_id)
        try:
            exists = user_ref.get().exists
            if picture and bucket is not None:
                profile["profilePicUrl"] = upload_image(
                    bucket, f"profilePictures/{user_id}", picture
                )
            profile["updatedAt"] = now
            if exists:
                user_ref.update(profile)
            else:
                profile.update({"uid": user_id, "createdAt": now})
                user_ref.set(profile)
            stored = user_ref.get().to_dict()
        except Exception as e:
            logger.error(f"Error saving profile for {user_id}: {e}")
            return Failure.store()

        if exists:
            logger.info(f"Profile updated for {user_id}")
            return Success("Profile updated!", id=user_id, data=stored)
        logger.info(f"Profile created for {user_id}")
        return Success("Profile created!", id=user_id, data=stored)

    @staticmethod
    def is_profile_complete(profile: Optional[dict[str, Any]]) -> bool:
        """Check whether a profile has the name other riders see."""
        return bool((profile or {}).get("fullName"))
