"""Service layer for group membership."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists

from campusrides.core.constants import GROUP_ID_MAX_ATTEMPTS, GROUPS_COLLECTION
from campusrides.core.storage import upload_image
from campusrides.core.transactions import run_transaction
from campusrides.core.types import Failure, Result, Success

from .utils import generate_group_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction
    from werkzeug.datastructures import FileStorage

    from .models import Group

logger = logging.getLogger(__name__)


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def create_group(  # noqa: PLR0913
        db: Client,
        bucket: Any,
        name: str,
        destination: str,
        description: Optional[str],
        color: str,
        image: Optional[FileStorage],
        owner_id: str,
    ) -> Result:
        """Create a group owned by ``owner_id`` with the owner as first member."""
        if not name:
            return Failure.validation("Name is required to make a group!")
        if not destination:
            return Failure.validation("Destination is required to make a group!")
        if not color:
            return Failure.validation("Color is required to make a group!")
        if not owner_id:
            return Failure.validation("Error making group!")

        group_data = {
            "name": name,
            "destination": destination,
            "description": description or "",
            "color": color,
            "imageUrl": None,
            "ownerId": owner_id,
            "members": [owner_id],
            "createdAt": firestore.SERVER_TIMESTAMP,
        }

        try:
            group_ref = GroupService._create_with_unique_id(db, group_data)
        except Exception as e:
            logger.error(f"Error creating group: {e}")
            return Failure.store()

        if group_ref is None:
            return Failure.conflict("Could not create a unique group code!")

        if image:
            GroupService._attach_image(bucket, group_ref, image)

        logger.info(f"Group {group_ref.id} created by {owner_id}")
        return Success("Group created!", id=group_ref.id)

    @staticmethod
    def _create_with_unique_id(
        db: Client, group_data: dict[str, Any]
    ) -> Optional[DocumentReference]:
        """Write the group under a fresh random code, retrying on collision.

        ``create`` fails with AlreadyExists when the code is taken, so two
        groups can never share a document.
        """
        for _ in range(GROUP_ID_MAX_ATTEMPTS):
            group_ref = db.collection(GROUPS_COLLECTION).document(generate_group_id())
            try:
                group_ref.create(group_data)
            except AlreadyExists:
                logger.warning(f"Group code {group_ref.id} already taken, retrying")
                continue
            return group_ref
        return None

    @staticmethod
    def _attach_image(
        bucket: Any, group_ref: DocumentReference, image: FileStorage
    ) -> None:
        """Upload the group image and store its URL on the group.

        A failed upload leaves the group without an image.
        """
        if bucket is None:
            logger.warning("No storage bucket configured, skipping group image")
            return
        try:
            image_url = upload_image(bucket, f"groups/{group_ref.id}", image)
            group_ref.update({"imageUrl": image_url})
        except Exception as e:
            logger.error(f"Error uploading image for group {group_ref.id}: {e}")

    @staticmethod
    def _add_member_transaction(
        transaction: Transaction, group_ref: DocumentReference, user_id: str
    ) -> Result:
        """Append a user to the group's members inside a transaction."""
        snapshot = group_ref.get(transaction=transaction)
        if not snapshot.exists:
            return Failure.not_found("Group does not exist!")

        members = list((snapshot.to_dict() or {}).get("members", []))
        if user_id in members:
            return Failure.conflict("You are already in this group!")

        members.append(user_id)
        transaction.update(group_ref, {"members": members})
        return Success("Joined group!")

    @staticmethod
    def add_member(db: Client, user_id: str, group_id: str) -> Result:
        """Add a user to a group."""
        if not user_id:
            return Failure.validation("Error joining group!")

        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)
        try:
            result = run_transaction(
                db, GroupService._add_member_transaction, group_ref, user_id
            )
        except Exception as e:
            logger.error(f"Error adding {user_id} to group {group_id}: {e}")
            return Failure.store()

        if result.ok:
            logger.info(f"User {user_id} joined group {group_id}")
        return result

    @staticmethod
    def get_group_by_id(db: Client, group_id: str) -> Result:
        """Fetch a single group."""
        try:
            snapshot = db.collection(GROUPS_COLLECTION).document(group_id).get()
        except Exception as e:
            logger.error(f"Error fetching group {group_id}: {e}")
            return Failure.store(str(e) or "Unknown error")

        if not snapshot.exists:
            return Failure.not_found(f"Group code {group_id} doesn't exist!")

        group: Group = {**snapshot.to_dict(), "id": snapshot.id}
        return Success("Group found.", id=snapshot.id, data=group)

    @staticmethod
    def get_groups_by_user_id(db: Client, user_id: str) -> list[Group]:
        """Return the groups a user belongs to, newest first."""
        query = (
            db.collection(GROUPS_COLLECTION)
            .where(filter=firestore.FieldFilter("members", "array_contains", user_id))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        return [{**doc.to_dict(), "id": doc.id} for doc in query.stream()]
