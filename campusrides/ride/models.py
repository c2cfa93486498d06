"""Data models for the ride blueprint."""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from campusrides.core.types import FirestoreDocument


class _RiderBase(TypedDict):
    id: str
    name: str


class Rider(_RiderBase, total=False):
    """A participant embedded in a ride."""

    profilePicUrl: Optional[str]


class Ride(FirestoreDocument, total=False):
    """A ride document stored under ``groups/{groupId}/rides``."""

    groupId: str
    driver: Rider
    carId: str
    maxRiders: int
    riders: list[Rider]
    vibe: str
    startDateTime: Optional[str]


def make_rider(user_id: str, profile: Optional[dict[str, Any]] = None) -> Rider:
    """Build a rider value from a user id and their profile document."""
    profile = profile or {}
    rider: Rider = {
        "id": user_id,
        "name": profile.get("fullName") or profile.get("name") or "",
    }
    pic = profile.get("profilePicUrl") or profile.get("profilePicURL")
    if pic:
        rider["profilePicUrl"] = pic
    return rider
