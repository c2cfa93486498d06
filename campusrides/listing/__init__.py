"""The marketplace blueprint."""

from flask import Blueprint

bp = Blueprint("listing", __name__, url_prefix="/marketplace")

from . import routes  # noqa: E402

__all__ = ["routes"]
