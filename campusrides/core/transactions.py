"""Helpers for running Firestore transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from firebase_admin import firestore

from .constants import TRANSACTION_MAX_ATTEMPTS

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def run_transaction(db: Client, body: Callable[..., Any], *args: Any) -> Any:
    """Run ``body(transaction, *args)`` in a Firestore transaction.

    Firestore re-runs the body when the documents it read change before the
    commit, so the body must only read and write through the transaction and
    report its outcome through its return value.
    """
    transaction = db.transaction(max_attempts=TRANSACTION_MAX_ATTEMPTS)
    return firestore.transactional(body)(transaction, *args)
