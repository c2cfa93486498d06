"""Service layer for the campus marketplace."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from firebase_admin import firestore

from campusrides.core.constants import (
    LISTING_ACTIVE,
    LISTING_CATEGORIES,
    LISTING_CONDITIONS,
    LISTING_MAX_IMAGES,
    LISTING_PAGE_SIZE,
    LISTING_SOLD,
    LISTINGS_COLLECTION,
    SAVED_ITEMS_COLLECTION,
)
from campusrides.core.storage import upload_image
from campusrides.core.types import Failure, Result, Success

from .models import saved_item_id
from .utils import (
    in_price_range,
    is_available,
    matches_terms,
    search_terms,
    title_match_count,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

    from .models import Listing, SavedItem

logger = logging.getLogger(__name__)

LISTING_NOT_FOUND = "Listing does not exist!"
EDITABLE_FIELDS = ("title", "description", "price", "category", "condition", "location")


def _validate(fields: dict[str, Any]) -> Optional[Failure]:
    if not (fields.get("title") or "").strip():
        return Failure.validation("Please fill in all required fields")
    price = fields.get("price")
    if price is None or price < 0:
        return Failure.validation("Price must be zero or more.")
    if fields.get("category") not in LISTING_CATEGORIES:
        return Failure.validation("Please select a category.")
    if fields.get("condition") not in LISTING_CONDITIONS:
        return Failure.validation("Please select a condition.")
    return None


class ListingService:
    """Service class for marketplace listings and saved items."""

    @staticmethod
    def _listings(db: Client) -> Any:
        return db.collection(LISTINGS_COLLECTION)

    @staticmethod
    def _to_list(docs: Any) -> list[dict[str, Any]]:
        return [{**doc.to_dict(), "id": doc.id} for doc in docs]

    @staticmethod
    def _upload_images(
        bucket: Any, seller_id: str, images: Optional[Iterable[FileStorage]]
    ) -> list[str]:
        files = [image for image in images or [] if image]
        if bucket is None or not files:
            return []
        return [
            upload_image(bucket, f"marketplace/{seller_id}", image)
            for image in files[:LISTING_MAX_IMAGES]
        ]

    @staticmethod
    def create_listing(  # noqa: PLR0913
        db: Client,
        seller_id: str,
        seller: dict[str, Any],
        fields: dict[str, Any],
        bucket: Any = None,
        images: Optional[Iterable[FileStorage]] = None,
    ) -> Result:
        """Put an item up for sale."""
        failure = _validate(fields)
        if failure:
            return failure

        try:
            listing_data = {
                **{key: fields.get(key) for key in EDITABLE_FIELDS},
                "price": float(fields["price"]),
                "imageUrls": ListingService._upload_images(bucket, seller_id, images),
                "sellerId": seller_id,
                "sellerName": seller.get("fullName") or "Anonymous",
                "sellerPhoto": seller.get("profilePicUrl"),
                "status": LISTING_ACTIVE,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
            _, listing_ref = ListingService._listings(db).add(listing_data)
        except Exception as e:
            logger.error(f"Error creating listing for {seller_id}: {e}")
            return Failure.store("Failed to create listing. Please try again.")

        logger.info(f"Listing {listing_ref.id} created by {seller_id}")
        return Success("Listing created!", id=listing_ref.id)

    @staticmethod
    def get_listing(db: Client, listing_id: str) -> Result:
        """Fetch a single listing."""
        try:
            listing_doc = ListingService._listings(db).document(listing_id).get()
        except Exception as e:
            logger.error(f"Error fetching listing {listing_id}: {e}")
            return Failure.store()
        if not listing_doc.exists:
            return Failure.not_found(LISTING_NOT_FOUND)
        listing: Listing = {**listing_doc.to_dict(), "id": listing_doc.id}
        return Success("Listing found.", id=listing_doc.id, data=listing)

    @staticmethod
    def _owned_listing(db: Client, listing_id: str, user_id: str) -> Result:
        result = ListingService.get_listing(db, listing_id)
        if result.ok and result.data.get("sellerId") != user_id:
            return Failure.forbidden("You can only change your own listings.")
        return result

    @staticmethod
    def _write(db: Client, listing_id: str, data: dict[str, Any], action: str) -> bool:
        try:
            ListingService._listings(db).document(listing_id).update(data)
        except Exception as e:
            logger.error(f"Error {action} listing {listing_id}: {e}")
            return False
        return True

    @staticmethod
    def update_listing(  # noqa: PLR0913
        db: Client,
        listing_id: str,
        user_id: str,
        fields: dict[str, Any],
        bucket: Any = None,
        images: Optional[Iterable[FileStorage]] = None,
    ) -> Result:
        """Change a listing's details. New photos replace the old ones."""
        result = ListingService._owned_listing(db, listing_id, user_id)
        if not result.ok:
            return result
        failure = _validate(fields)
        if failure:
            return failure

        update_data = {key: fields.get(key) for key in EDITABLE_FIELDS}
        update_data["price"] = float(fields["price"])
        update_data["updatedAt"] = firestore.SERVER_TIMESTAMP
        try:
            photos = ListingService._upload_images(bucket, user_id, images)
        except Exception as e:
            logger.error(f"Error uploading photos for listing {listing_id}: {e}")
            return Failure.store()
        if photos:
            update_data["imageUrls"] = photos

        if not ListingService._write(db, listing_id, update_data, "updating"):
            return Failure.store()
        return Success("Listing updated!", id=listing_id)

    @staticmethod
    def set_status(db: Client, listing_id: str, user_id: str, status: str) -> Result:
        """Mark a listing sold, or put a sold listing back on sale."""
        result = ListingService._owned_listing(db, listing_id, user_id)
        if not result.ok:
            return result
        if (result.data.get("status") or LISTING_ACTIVE) == status:
            return Failure.conflict(f"This listing is already {status}.")

        update_data: dict[str, Any] = {
            "status": status,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        if status == LISTING_SOLD:
            update_data["soldAt"] = firestore.SERVER_TIMESTAMP
            message = "Item marked as sold!"
        else:
            update_data["soldAt"] = None
            message = "Item is back on sale!"

        if not ListingService._write(db, listing_id, update_data, "changing status of"):
            return Failure.store()
        return Success(message, id=listing_id)

    @staticmethod
    def delete_listing(db: Client, listing_id: str, user_id: str) -> Result:
        """Delete a listing the user is selling.

        Other users' saved copies stay until they unsave them.
        """
        result = ListingService._owned_listing(db, listing_id, user_id)
        if not result.ok:
            return result
        try:
            ListingService._listings(db).document(listing_id).delete()
        except Exception as e:
            logger.error(f"Error deleting listing {listing_id}: {e}")
            return Failure.store()
        logger.info(f"Listing {listing_id} deleted by {user_id}")
        return Success("Listing deleted!")

    @staticmethod
    def get_listings_by_category(db: Client, category: str) -> list[dict[str, Any]]:
        """Return a category's available listings, newest first."""
        query = (
            ListingService._listings(db)
            .where(filter=firestore.FieldFilter("category", "==", category))
            .order_by("createdAt", direction=firestore.Query.DESCENDING)
        )
        listings = ListingService._to_list(query.stream())
        return [listing for listing in listings if is_available(listing)]

    @staticmethod
    def search_listings(  # noqa: PLR0913
        db: Client,
        query_text: Optional[str] = None,
        category: Optional[str] = None,
        conditions: Optional[list[str]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: str = "relevance",
        exclude_seller: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Find available listings.

        Firestore narrows by category and orders the results; the text,
        price and condition filters run here, as Firestore has no full-text
        search. With ``relevance`` and a query, listings matching more terms
        in their title come first, newest first among equals.
        """
        query = ListingService._listings(db)
        if category:
            query = query.where(
                filter=firestore.FieldFilter("category", "==", category)
            )
        if sort in ("price_low", "price_high"):
            direction = (
                firestore.Query.ASCENDING
                if sort == "price_low"
                else firestore.Query.DESCENDING
            )
            query = query.order_by("price", direction=direction)
        else:
            query = query.order_by("createdAt", direction=firestore.Query.DESCENDING)

        terms = search_terms(query_text)
        listings = [
            listing
            for listing in ListingService._to_list(query.stream())
            if is_available(listing)
            and listing.get("sellerId") != exclude_seller
            and (not terms or matches_terms(listing, terms))
            and in_price_range(listing, min_price, max_price)
            and (not conditions or listing.get("condition") in conditions)
        ]
        if sort == "relevance" and terms:
            listings.sort(key=lambda listing: -title_match_count(listing, terms))
        return listings[:LISTING_PAGE_SIZE]

    @staticmethod
    def get_listings_by_seller(
        db: Client, seller_id: str, status: Optional[str] = None
    ) -> list[dict[str, Any]]:
        """Return a seller's listings, newest first, optionally by status."""
        query = ListingService._listings(db).where(
            filter=firestore.FieldFilter("sellerId", "==", seller_id)
        )
        if status:
            query = query.where(filter=firestore.FieldFilter("status", "==", status))
        query = query.order_by("createdAt", direction=firestore.Query.DESCENDING)
        return ListingService._to_list(query.stream())

    @staticmethod
    def get_sold_items(db: Client, seller_id: str) -> list[dict[str, Any]]:
        """Return a seller's sold listings, most recently sold first."""
        query = (
            ListingService._listings(db)
            .where(filter=firestore.FieldFilter("sellerId", "==", seller_id))
            .where(filter=firestore.FieldFilter("status", "==", LISTING_SOLD))
            .order_by("soldAt", direction=firestore.Query.DESCENDING)
        )
        return ListingService._to_list(query.stream())

    @staticmethod
    def save_listing(db: Client, user_id: str, listing_id: str) -> Result:
        """Bookmark a listing for a user. Saving twice keeps one bookmark."""
        result = ListingService.get_listing(db, listing_id)
        if not result.ok:
            return result
        listing = result.data

        image_urls = listing.get("imageUrls") or []
        saved: SavedItem = {
            "userId": user_id,
            "listingId": listing_id,
            "title": listing.get("title"),
            "price": listing.get("price"),
            "imageUrl": image_urls[0] if image_urls else None,
            "category": listing.get("category"),
            "condition": listing.get("condition"),
            "savedAt": firestore.SERVER_TIMESTAMP,
        }
        try:
            db.collection(SAVED_ITEMS_COLLECTION).document(
                saved_item_id(user_id, listing_id)
            ).set(saved)
        except Exception as e:
            logger.error(f"Error saving listing {listing_id} for {user_id}: {e}")
            return Failure.store("Failed to save item. Please try again.")
        return Success("Item saved!", id=listing_id)

    @staticmethod
    def unsave_listing(db: Client, user_id: str, listing_id: str) -> Result:
        """Remove a user's bookmark of a listing."""
        try:
            db.collection(SAVED_ITEMS_COLLECTION).document(
                saved_item_id(user_id, listing_id)
            ).delete()
        except Exception as e:
            logger.error(f"Error unsaving listing {listing_id} for {user_id}: {e}")
            return Failure.store("Failed to save item. Please try again.")
        return Success("Item removed from saved items.", id=listing_id)

    @staticmethod
    def is_saved(db: Client, user_id: str, listing_id: str) -> bool:
        saved_doc = (
            db.collection(SAVED_ITEMS_COLLECTION)
            .document(saved_item_id(user_id, listing_id))
            .get()
        )
        return saved_doc.exists

    @staticmethod
    def get_saved_items(db: Client, user_id: str) -> list[dict[str, Any]]:
        """Return a user's saved items, most recently saved first."""
        query = (
            db.collection(SAVED_ITEMS_COLLECTION)
            .where(filter=firestore.FieldFilter("userId", "==", user_id))
            .order_by("savedAt", direction=firestore.Query.DESCENDING)
        )
        return ListingService._to_list(query.stream())
