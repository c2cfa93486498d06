"""Routes for the car blueprint."""

from flask import jsonify, session

from campusrides.auth.decorators import login_required
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import ValidationError, raise_for_failure

from . import bp
from .forms import CarForm
from .services import CarService


def _validated_form():
    form = CarForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))
    return form


def _car_fields(form):
    return {
        "car_name": form.car_name.data,
        "max_capacity": form.max_capacity.data,
        "model": form.model.data or "",
        "car_number": form.car_number.data or "",
        "image": form.image.data,
    }


@bp.route("/", methods=["GET"])
@login_required
def my_cars():
    """List the current user's cars."""
    cars = CarService.get_cars_by_user_id(get_context().db, session["user_id"])
    return jsonify({"cars": cars})


@bp.route("/", methods=["POST"])
@login_required
def add_car():
    """Register a car for the current user."""
    form = _validated_form()
    context = get_context()
    result = CarService.create_car(
        context.db, session["user_id"], bucket=context.bucket, **_car_fields(form)
    )
    return respond(result, 201)


@bp.route("/<string:car_id>", methods=["GET"])
@login_required
def view_car(car_id):
    """Show one car."""
    car = raise_for_failure(CarService.get_car(get_context().db, car_id)).data
    return jsonify({"car": car})


@bp.route("/<string:car_id>/edit", methods=["POST"])
@login_required
def edit_car(car_id):
    """Change one of the current user's cars."""
    form = _validated_form()
    context = get_context()
    result = CarService.update_car(
        context.db,
        car_id,
        session["user_id"],
        bucket=context.bucket,
        **_car_fields(form),
    )
    return respond(result)


@bp.route("/<string:car_id>/delete", methods=["POST"])
@login_required
def delete_car(car_id):
    """Delete one of the current user's cars."""
    return respond(
        CarService.delete_car(get_context().db, car_id, session["user_id"])
    )
