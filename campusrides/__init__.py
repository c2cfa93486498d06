"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, current_app, g, session
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import MAIL_SENDER_NAME
from .core.context import get_context, init_context
from .extensions import csrf, mail


def _load_credentials(app):
    """Find Firebase credentials in the environment, a local file, or ADC.

    Returns a (credential, project_id) pair; the credential is None when
    nothing usable was found.
    """
    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # Then a credentials file next to the package (for local dev)
    cred_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
    )
    if os.path.exists(cred_path):
        try:
            with open(cred_path, "r") as f:
                cred_info = json.load(f)
            return credentials.Certificate(cred_path), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error loading credentials from file: {e}")

    try:
        return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")
    except Exception as e:
        app.logger.error(
            f"Could not find any valid credentials (env, file, or default): {e}"
        )
    return None, None


def _clean_env(name, strip_spaces=False):
    """Read an env var, dropping wrapping quotes and optionally all spaces."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().strip("\"'")
    if strip_spaces:
        value = value.replace(" ", "")
    return value


def _init_firebase(app):
    cred, project_id = _load_credentials(app)
    if not cred or firebase_admin._apps:
        return

    storage_bucket = app.config.get("FIREBASE_STORAGE_BUCKET")
    if not storage_bucket and project_id:
        storage_bucket = f"{project_id}.firebasestorage.app"
        app.config["FIREBASE_STORAGE_BUCKET"] = storage_bucket

    firebase_options = {"storageBucket": storage_bucket}
    if project_id:
        firebase_options["projectId"] = project_id

    try:
        firebase_admin.initialize_app(cred, firebase_options)
    except ValueError:
        # Raised when the default app already exists.
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        APP_URL=os.environ.get("APP_URL") or "http://localhost:3000",
        FIREBASE_STORAGE_BUCKET=os.environ.get("FIREBASE_STORAGE_BUCKET"),
        MAIL_SERVER=os.environ.get("MAIL_SERVER") or "smtp.gmail.com",
        MAIL_PORT=int(os.environ.get("MAIL_PORT") or 587),
        MAIL_USE_TLS=(os.environ.get("MAIL_USE_TLS") or "true").lower()
        in ["true", "1", "t"],
        MAIL_USE_SSL=(os.environ.get("MAIL_USE_SSL") or "false").lower()
        in ["true", "1", "t"],
        MAIL_USERNAME=_clean_env("MAIL_USERNAME"),
        # App passwords are often pasted with spaces between the groups
        MAIL_PASSWORD=_clean_env("MAIL_PASSWORD", strip_spaces=True),
        MAIL_DEFAULT_SENDER=os.environ.get("MAIL_DEFAULT_SENDER")
        or (MAIL_SENDER_NAME, "notifications@campusrides.com"),
        MAX_CONTENT_LENGTH=10 * 1024 * 1024,
    )

    if test_config:
        app.config.update(test_config)

    # Firebase and the client context are set up lazily in tests
    if not app.config.get("TESTING"):
        _init_firebase(app)
        if firebase_admin._apps:
            init_context(app)

    mail.init_app(app)
    csrf.init_app(app)

    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import car as car_bp

    app.register_blueprint(car_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import ride as ride_bp

    app.register_blueprint(ride_bp.bp)

    from . import booking as booking_bp

    app.register_blueprint(booking_bp.bp)

    from . import blog as blog_bp

    app.register_blueprint(blog_bp.bp)

    from . import listing as listing_bp

    app.register_blueprint(listing_bp.bp)

    from . import chat as chat_bp

    app.register_blueprint(chat_bp.bp)

    from . import notifications as notifications_bp

    app.register_blueprint(notifications_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_logged_in_user():
        """If a user_id is in the session, load the user profile into g."""
        user_id = session.get("user_id")
        g.user = None
        if user_id is None:
            return

        try:
            user_doc = get_context().db.collection("users").document(user_id).get()
            if user_doc.exists:
                g.user = user_doc.to_dict()
                g.user["uid"] = user_id
            else:
                session.clear()
                current_app.logger.warning(
                    f"User {user_id} in session but not found in Firestore."
                )
        except Exception as e:
            current_app.logger.error(f"Error loading user from session: {e}")
            session.clear()

    @app.route("/health")
    def health_check():
        """Perform a simple health check."""
        return "OK", 200

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
