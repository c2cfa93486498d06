"""Routes for the booking blueprint."""

from flask import jsonify, session

from campusrides.auth.decorators import login_required
from campusrides.core.context import get_context

from . import bp
from .services import BookingService


@bp.route("/", methods=["GET"])
@login_required
def my_bookings():
    """Show the current user's current and previous bookings."""
    bookings = BookingService.get_bookings_for_rider(
        get_context().db, session["user_id"]
    )
    current, previous = BookingService.partition_bookings(bookings)
    return jsonify({"current": current, "previous": previous})
