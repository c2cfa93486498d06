"""Client handles shared by the request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from firebase_admin import firestore, storage
from flask import current_app

if TYPE_CHECKING:
    from flask import Flask
    from google.cloud.firestore_v1.client import Client

EXTENSION_KEY = "campusrides"


@dataclass
class ClientContext:
    """Firestore client and storage bucket for one application instance."""

    db: Client
    bucket: Any = None


def init_context(
    app: Flask, db: Optional[Client] = None, bucket: Any = None
) -> ClientContext:
    """Build the client context for an app.

    When no handles are given they are created from the default Firebase
    app, so this must run after ``firebase_admin.initialize_app``.
    """
    if db is None:
        db = firestore.client()
    if bucket is None and app.config.get("FIREBASE_STORAGE_BUCKET"):
        bucket = storage.bucket()
    context = ClientContext(db=db, bucket=bucket)
    app.extensions[EXTENSION_KEY] = context
    return context


def get_context() -> ClientContext:
    """Return the client context of the current app, creating it on first use."""
    context = current_app.extensions.get(EXTENSION_KEY)
    if context is None:
        context = init_context(current_app._get_current_object())  # type: ignore[attr-defined]
    return context
