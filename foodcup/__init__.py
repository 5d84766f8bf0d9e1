"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, g, redirect, url_for
from werkzeug.middleware.proxy_fix import ProxyFix

from .constants import STORAGE_KEY
from .extensions import csrf
from .storage import FileSlot, TournamentStore


def _env_flag(name, default):
    """Read a true/false environment variable."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ["true", "1", "t"]


def _load_credentials(app):
    """Return ``(credential, project_id)`` from the first source that works.

    Sources are tried in order: the FIREBASE_CREDENTIALS_JSON config value,
    a ``firebase_credentials.json`` file next to the package, then the
    application default credentials.
    """
    project_id = app.config.get("FIREBASE_PROJECT_ID")

    cred_json = app.config.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), (
                cred_info.get("project_id") or project_id
            )
        except ValueError as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    cred_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
    )
    if os.path.exists(cred_path):
        try:
            with open(cred_path, "r") as f:
                cred_info = json.load(f)
            return credentials.Certificate(cred_path), (
                cred_info.get("project_id") or project_id
            )
        except ValueError as e:
            app.logger.error(f"Error loading {cred_path}: {e}")

    try:
        return credentials.ApplicationDefault(), project_id
    except Exception as e:
        app.logger.error(f"No usable Firebase credentials: {e}")
        return None, project_id


def init_firebase(app):
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return
    cred, project_id = _load_credentials(app)
    if cred is None:
        # Sign-in and the cloud mirror stay unavailable
        return
    try:
        firebase_admin.initialize_app(
            cred, {"projectId": project_id} if project_id else None
        )
    except ValueError:
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None, store=None):
    """Create and configure an instance of the Flask application.

    ``store`` lets the caller hand in an already constructed
    ``TournamentStore``; otherwise one backed by a JSON file in the instance
    folder is built and loaded here.
    """
    app = Flask(
        __name__,
        instance_relative_config=True,
        static_folder="static",
        static_url_path="/static",
    )

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_API_KEY=os.environ.get("FIREBASE_API_KEY"),
        FIREBASE_AUTH_DOMAIN=os.environ.get("FIREBASE_AUTH_DOMAIN"),
        FIREBASE_PROJECT_ID=os.environ.get("FIREBASE_PROJECT_ID"),
        FIREBASE_APP_ID=os.environ.get("FIREBASE_APP_ID"),
        FIREBASE_CREDENTIALS_JSON=os.environ.get("FIREBASE_CREDENTIALS_JSON"),
        TOURNAMENT_STORAGE_DIR=os.environ.get("TOURNAMENT_STORAGE_DIR")
        or app.instance_path,
        TOURNAMENT_STORAGE_KEY=os.environ.get("TOURNAMENT_STORAGE_KEY")
        or STORAGE_KEY,
        SEED_SAMPLES=_env_flag("SEED_SAMPLES", True),
        CLOUD_MIRROR_ENABLED=_env_flag("CLOUD_MIRROR_ENABLED", True),
        CLOUD_MIRROR_ASYNC=_env_flag("CLOUD_MIRROR_ASYNC", True),
    )

    if test_config:
        app.config.update(test_config)
        # Tests only reach Firestore when they ask to
        if app.config.get("TESTING") and "CLOUD_MIRROR_ENABLED" not in test_config:
            app.config["CLOUD_MIRROR_ENABLED"] = False

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        init_firebase(app)

    # Ensure the instance folder exists
    try:
        os.makedirs(app.instance_path)
    except OSError:
        pass

    if store is None:
        from .tournament.samples import seed_samples

        store = TournamentStore(
            FileSlot(app.config["TOURNAMENT_STORAGE_DIR"]),
            key=app.config["TOURNAMENT_STORAGE_KEY"],
            seeder=seed_samples if app.config["SEED_SAMPLES"] else None,
        )
        store.load()
    app.extensions["tournament_store"] = store

    # Initialize extensions
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import user as user_bp

    app.register_blueprint(user_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    from .auth.utils import load_session_user

    @app.before_request
    def load_logged_in_user():
        """Expose the signed-in user, if any, as g.user."""
        g.user = load_session_user()

    @app.route("/")
    def index():
        """The browse screen is the landing page."""
        return redirect(url_for("tournament.list_tournaments"))

    @app.route("/health")
    def health_check():
        """Liveness check that also reports how many tournaments are loaded."""
        return {"status": "ok", "tournaments": len(store.all())}, 200

    from .utils import format_created_at, reward_mode_label

    app.add_template_filter(format_created_at)
    app.add_template_filter(reward_mode_label)

    @app.context_processor
    def inject_version():
        """Injects the application version into the template context."""
        return dict(app_version=os.environ.get("APP_VERSION", "dev"))

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
