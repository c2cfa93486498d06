"""Search helpers for the marketplace."""

from __future__ import annotations

from typing import Any, Iterable, Optional

from campusrides.core.constants import LISTING_CATEGORIES, LISTING_SOLD


def is_available(listing: dict[str, Any]) -> bool:
    """Check whether a listing can still be bought.

    Listings written before statuses existed have none and count as active.
    """
    return listing.get("status") != LISTING_SOLD


def search_terms(query: Optional[str]) -> list[str]:
    return [term for term in (query or "").lower().split() if term]


def matches_terms(listing: dict[str, Any], terms: Iterable[str]) -> bool:
    """Check whether any term appears in a listing's text fields."""
    haystacks = [
        (listing.get("title") or "").lower(),
        (listing.get("description") or "").lower(),
        LISTING_CATEGORIES.get(listing.get("category"), "").lower(),
        (listing.get("location") or "").lower(),
    ]
    return any(term in text for term in terms for text in haystacks)


def title_match_count(listing: dict[str, Any], terms: Iterable[str]) -> int:
    title = (listing.get("title") or "").lower()
    return sum(1 for term in terms if term in title)


def in_price_range(
    listing: dict[str, Any],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> bool:
    price = listing.get("price")
    if price is None:
        return min_price is None and max_price is None
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    return True
