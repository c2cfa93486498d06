"""Routes for the ride blueprint."""

from flask import g, jsonify, session

from campusrides.auth.decorators import login_required
from campusrides.car.services import CarService
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import (
    DuplicateResourceError,
    PermissionDeniedError,
    ValidationError,
    raise_for_failure,
)

from . import bp
from .forms import RideForm
from .models import make_rider
from .services import RideService
from .utils import is_participant, ride_has_capacity, ride_state


def _get_ride_or_404(db, group_id, ride_id):
    return raise_for_failure(RideService.get_ride(db, group_id, ride_id)).data


def _require_driver(ride, user_id):
    if (ride.get("driver") or {}).get("id") != user_id:
        raise PermissionDeniedError("Only the driver can change this ride.")


def _validated_form(db, user_id):
    form = RideForm()
    form.car_id.choices = [
        (car["id"], car["name"] or car["id"])
        for car in CarService.get_cars_by_user_id(db, user_id)
    ]
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
    return form


@bp.route("/", methods=["GET"])
@login_required
def list_rides(group_id):
    """List a group's rides with their capacity state."""
    rides = RideService.get_rides_by_group_id(get_context().db, group_id)
    for ride in rides:
        ride["state"] = ride_state(ride)
    return jsonify({"rides": rides})


@bp.route("/", methods=["POST"])
@login_required
def create_ride(group_id):
    """Offer a ride in the group with the current user driving."""
    db = get_context().db
    user_id = session["user_id"]
    form = _validated_form(db, user_id)

    result = RideService.create_ride(
        db,
        group_id,
        driver=make_rider(user_id, g.user),
        vibe=form.vibe.data,
        car_id=form.car_id.data,
        max_riders=form.max_riders.data,
        start_date_time=form.start_date_time.data or None,
    )
    return respond(result, 201)


@bp.route("/<string:ride_id>/join", methods=["POST"])
@login_required
def join_ride(group_id, ride_id):
    """Join a ride that still has seats."""
    db = get_context().db
    user_id = session["user_id"]
    ride = _get_ride_or_404(db, group_id, ride_id)

    if is_participant(ride, user_id):
        raise DuplicateResourceError("You are already in this ride!")
    # Seats are only counted here; the join transaction does not check them.
    if not ride_has_capacity(ride):
        raise DuplicateResourceError("This ride is fully booked!")
    if RideService.check_user_in_rides(db, user_id, group_id):
        raise DuplicateResourceError("You are already in a ride in this group!")

    return respond(
        RideService.join_ride(db, group_id, ride_id, make_rider(user_id, g.user))
    )


@bp.route("/<string:ride_id>/leave", methods=["POST"])
@login_required
def leave_ride(group_id, ride_id):
    """Leave a ride the current user is riding in."""
    return respond(
        RideService.leave_ride(get_context().db, ride_id, group_id, session["user_id"])
    )


@bp.route("/<string:ride_id>/edit", methods=["POST"])
@login_required
def edit_ride(group_id, ride_id):
    """Change a ride's car, seats, vibe or departure time."""
    db = get_context().db
    user_id = session["user_id"]
    _require_driver(_get_ride_or_404(db, group_id, ride_id), user_id)
    form = _validated_form(db, user_id)

    result = RideService.edit_ride(
        db,
        group_id,
        ride_id,
        car_id=form.car_id.data,
        max_riders=form.max_riders.data,
        vibe=form.vibe.data,
        start_date_time=form.start_date_time.data or None,
    )
    return respond(result)


@bp.route("/<string:ride_id>/delete", methods=["POST"])
@login_required
def delete_ride(group_id, ride_id):
    """Delete a ride the current user drives."""
    db = get_context().db
    _require_driver(_get_ride_or_404(db, group_id, ride_id), session["user_id"])
    return respond(RideService.delete_ride(db, ride_id, group_id))
