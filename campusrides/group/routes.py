"""Routes for the group blueprint."""

from flask import jsonify, session

from campusrides.auth.decorators import login_required
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import ValidationError, raise_for_failure
from campusrides.ride.services import RideService
from campusrides.ride.utils import ride_state

from . import bp
from .forms import GroupForm
from .services import GroupService


@bp.route("/", methods=["GET"])
@login_required
def view_groups():
    """List the groups the current user belongs to."""
    db = get_context().db
    groups = GroupService.get_groups_by_user_id(db, session["user_id"])
    return jsonify({"groups": groups})


@bp.route("/create", methods=["POST"])
@login_required
def create_group():
    """Create a new group owned by the current user."""
    form = GroupForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    context = get_context()
    result = GroupService.create_group(
        context.db,
        context.bucket,
        name=form.name.data,
        destination=form.destination.data,
        description=form.description.data,
        color=form.color.data,
        image=form.image.data,
        owner_id=session["user_id"],
    )
    return respond(result, 201)


@bp.route("/<string:group_id>", methods=["GET"])
@login_required
def view_group(group_id):
    """Show a group with its rides."""
    db = get_context().db
    result = raise_for_failure(GroupService.get_group_by_id(db, group_id))

    user_id = session["user_id"]
    rides = RideService.get_rides_by_group_id(db, group_id)
    for ride in rides:
        ride["state"] = ride_state(ride)

    return jsonify(
        {
            "group": result.data,
            "rides": rides,
            "is_member": user_id in result.data.get("members", []),
            "in_ride": RideService.check_user_in_rides(db, user_id, group_id),
        }
    )


@bp.route("/<string:group_id>/join", methods=["POST"])
@login_required
def join_group(group_id):
    """Join a group by its code."""
    return respond(
        GroupService.add_member(get_context().db, session["user_id"], group_id)
    )
