"""The car blueprint."""

from flask import Blueprint

bp = Blueprint("car", __name__, url_prefix="/cars")

from . import routes  # noqa: E402

__all__ = ["routes"]
