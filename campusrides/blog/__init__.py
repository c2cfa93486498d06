"""The blog blueprint."""

from flask import Blueprint

bp = Blueprint("blog", __name__, url_prefix="/blogs")

from . import routes  # noqa: E402

__all__ = ["routes"]
