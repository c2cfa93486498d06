"""Data models for the group blueprint."""

from __future__ import annotations

from typing import Optional

from campusrides.core.types import FirestoreDocument


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    destination: str
    description: str
    color: str
    imageUrl: Optional[str]
    ownerId: str
    members: list[str]
