"""The booking blueprint."""

from flask import Blueprint

bp = Blueprint("booking", __name__, url_prefix="/bookings")

from . import routes  # noqa: E402

__all__ = ["routes"]
