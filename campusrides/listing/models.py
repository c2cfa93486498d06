"""Data models for the marketplace."""

from __future__ import annotations

from typing import Any, Optional

from campusrides.core.types import FirestoreDocument


class Listing(FirestoreDocument, total=False):
    """An item for sale in ``marketplace_listings``."""

    title: str
    description: str
    price: float
    category: str
    condition: str
    location: str
    imageUrls: list[str]
    sellerId: str
    sellerName: str
    sellerPhoto: Optional[str]
    status: str
    soldAt: Any


class SavedItem(FirestoreDocument, total=False):
    """A user's bookmark of a listing, stored as ``saved_items/{userId}_{listingId}``.

    It copies the listing's headline fields so the saved list renders without
    reading every listing.
    """

    userId: str
    listingId: str
    title: str
    price: float
    imageUrl: Optional[str]
    category: str
    condition: str
    savedAt: Any


def saved_item_id(user_id: str, listing_id: str) -> str:
    """Return the document id of a user's bookmark of a listing."""
    return f"{user_id}_{listing_id}"
