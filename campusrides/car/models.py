"""Data models for cars."""

from __future__ import annotations

from typing import Any

from campusrides.core.types import FirestoreDocument


class Car(FirestoreDocument, total=False):
    """A car document in the ``cars`` collection."""

    ownerId: str
    carName: str
    model: str
    carNumber: str
    maxCapacity: int
    imageURLs: list[str]
    createdAt: Any
