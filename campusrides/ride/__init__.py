"""The ride blueprint, nested under a group."""

from flask import Blueprint

bp = Blueprint("ride", __name__, url_prefix="/group/<string:group_id>/rides")

from . import routes  # noqa: E402

__all__ = ["routes"]
