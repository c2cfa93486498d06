"""Core data types for the campusrides application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, TypedDict, Union

VALIDATION = "validation"
NOT_FOUND = "not_found"
CONFLICT = "conflict"
FORBIDDEN = "forbidden"
STORE = "store"


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    updatedAt: Any


@dataclass(frozen=True)
class Success:
    """A service call that completed."""

    message: str
    id: Optional[str] = None
    data: Any = None

    ok = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a JSON response."""
        payload: dict[str, Any] = {"success": self.message}
        if self.id is not None:
            payload["id"] = self.id
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass(frozen=True)
class Failure:
    """A service call that did not complete, and why."""

    message: str
    kind: str = STORE

    ok = False

    @classmethod
    def validation(cls, message: str) -> Failure:
        return cls(message, VALIDATION)

    @classmethod
    def not_found(cls, message: str) -> Failure:
        return cls(message, NOT_FOUND)

    @classmethod
    def conflict(cls, message: str) -> Failure:
        return cls(message, CONFLICT)

    @classmethod
    def forbidden(cls, message: str) -> Failure:
        return cls(message, FORBIDDEN)

    @classmethod
    def store(cls, message: str = "An error occurred!") -> Failure:
        return cls(message, STORE)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a JSON response."""
        return {"error": self.message}


Result = Union[Success, Failure]
