"""Uploads to Firebase Storage."""

from __future__ import annotations

import datetime
import os
import tempfile
from typing import TYPE_CHECKING, Any

from werkzeug.utils import secure_filename

if TYPE_CHECKING:
    from werkzeug.datastructures import FileStorage


def build_upload_path(prefix: str, filename: str | None) -> str:
    """Build a ``{prefix}/{timestamp}_{filename}`` object path."""
    safe_name = secure_filename(filename or "upload.jpg") or "upload.jpg"
    timestamp = datetime.datetime.now(datetime.timezone.utc).strftime(
        "%Y%m%dT%H%M%S%f"
    )
    return f"{prefix}/{timestamp}_{safe_name}"


def upload_image(bucket: Any, prefix: str, file_storage: FileStorage) -> str:
    """Upload an image to the bucket and return its public URL.

    Raises whatever the storage client raises; callers decide whether a
    failed upload is fatal.
    """
    path = build_upload_path(prefix, file_storage.filename)
    blob = bucket.blob(path)

    with tempfile.NamedTemporaryFile(
        suffix=os.path.splitext(path)[1]
    ) as temp_file:
        file_storage.save(temp_file.name)
        blob.upload_from_filename(temp_file.name, content_type=file_storage.mimetype)

    blob.make_public()
    return blob.public_url
