"""Routes for the user blueprint."""

from flask import g, jsonify, session

from campusrides.auth.decorators import login_required
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import ValidationError, raise_for_failure

from . import bp
from .forms import ProfileForm
from .services import UserService


@bp.route("/profile", methods=["GET"])
@login_required
def view_profile():
    """Show the current user's profile."""
    return jsonify(
        {"user": g.user, "profileComplete": UserService.is_profile_complete(g.user)}
    )


@bp.route("/profile", methods=["POST"])
@login_required
def update_profile():
    """Fill in or change the current user's profile."""
    form = ProfileForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    context = get_context()
    result = UserService.create_or_update_profile(
        context.db,
        session["user_id"],
        {
            "fullName": form.full_name.data,
            "email": form.email.data or None,
            "university": form.university.data,
            "bio": form.bio.data,
            "location": form.location.data,
        },
        bucket=context.bucket,
        picture=form.profile_picture.data,
    )
    return respond(result)


@bp.route("/<string:user_id>", methods=["GET"])
@login_required
def view_user(user_id):
    """Show another user's public profile."""
    user = raise_for_failure(UserService.get_user_by_id(get_context().db, user_id)).data
    user.pop("email", None)
    return jsonify({"user": user})
