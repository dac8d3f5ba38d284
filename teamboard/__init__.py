"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import SEARCH_MIN_LENGTH
from .utils import FirestoreJSONProvider


def _load_credentials(app):
    """Find Firebase credentials: env JSON, then a local file, then ADC."""
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

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
        return credentials.ApplicationDefault(), app.config["FIREBASE_PROJECT_ID"]
    except Exception as e:
        app.logger.error(
            f"Could not find any valid credentials (env, file, or default): {e}"
        )
    return None, None


def init_firebase(app):
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return

    cred, project_id = _load_credentials(app)
    if not cred:
        return

    firebase_options = {}
    if project_id:
        firebase_options["projectId"] = project_id
    try:
        firebase_admin.initialize_app(cred, firebase_options)
    except ValueError:
        # This can happen if the app is already initialized, which is fine.
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__)
    app.json = FirestoreJSONProvider(app)

    # Load configuration
    app.config.from_mapping(
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        CORS_ALLOW_ORIGIN=os.environ.get("CORS_ALLOW_ORIGIN") or "*",
        SEARCH_MIN_LENGTH=int(
            os.environ.get("SEARCH_MIN_LENGTH") or SEARCH_MIN_LENGTH
        ),
        PROBE_MESSAGE=os.environ.get("PROBE_MESSAGE") or "OK",
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        init_firebase(app)

    # Register blueprints
    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import teams as teams_bp

    app.register_blueprint(teams_bp.bp)

    from . import tasks as tasks_bp

    app.register_blueprint(tasks_bp.bp)

    from . import notifications as notifications_bp

    app.register_blueprint(notifications_bp.bp)

    from . import main as main_bp

    app.register_blueprint(main_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
