"""Routes for the auth blueprint.

Sign-in happens with the Firebase client SDK; the client then posts its ID
token here to open a server-side session. A first sign-in also creates the
user's profile document from the token's claims.
"""

from firebase_admin import auth
from flask import current_app, jsonify, request, session

from campusrides.core.context import get_context
from campusrides.core.types import NOT_FOUND
from campusrides.user.services import UserService

from . import bp


@bp.route("/session_login", methods=["POST"])
def session_login():
    """Verify a Firebase ID token and store the user in the session."""
    id_token = (request.get_json(silent=True) or {}).get("idToken")
    if not id_token:
        return jsonify({"status": "error", "message": "Missing ID token."}), 400

    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, ValueError) as e:
        current_app.logger.warning(f"Rejected ID token: {e}")
        return jsonify({"status": "error", "message": "Invalid token."}), 401

    db = get_context().db
    uid = decoded_token["uid"]
    result = UserService.get_user_by_id(db, uid)
    if not result.ok and result.kind == NOT_FOUND:
        current_app.logger.info(f"Creating profile for first login of {uid}")
        result = UserService.create_or_update_profile(
            db,
            uid,
            {
                "email": decoded_token.get("email"),
                "fullName": decoded_token.get("name"),
            },
        )
    if not result.ok:
        return jsonify({"status": "error", "message": result.message}), 500

    session["user_id"] = uid
    return jsonify(
        {
            "status": "success",
            "profileComplete": UserService.is_profile_complete(result.data),
        }
    )


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    """Clear the session."""
    session.clear()
    return jsonify({"status": "success"})
