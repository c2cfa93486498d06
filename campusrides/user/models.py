"""Data models for users."""

from __future__ import annotations

from typing import Any, TypedDict


class User(TypedDict, total=False):
    """A user profile document in Firestore."""

    id: str
    uid: str
    fullName: str
    email: str
    profilePicUrl: str
    university: str
    bio: str
    location: str
    createdAt: Any
    updatedAt: Any
