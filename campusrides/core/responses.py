"""Turn service results into JSON responses."""

from flask import jsonify

from campusrides.errors import raise_for_failure


def respond(result, status=200):
    """Return a JSON response for a success, or raise the matching AppError."""
    raise_for_failure(result)
    return jsonify(result.to_dict()), status


def first_form_error(form):
    """Return the first validation message of a form."""
    for field_errors in form.errors.values():
        if field_errors:
            return field_errors[0]
    return "Invalid form submission."
