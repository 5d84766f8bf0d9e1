"""Error handlers shared by every blueprint.

Browser pages get a rendered template. JSON callers (the sign-in fetch and the
``/json`` tournament view) get ``{"status": "error", "message": ...}``.
"""

from flask import (
    Blueprint,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_wtf.csrf import CSRFError

from .errors import AppError, AuthenticationError, NotFoundError

error_handlers_bp = Blueprint("error_handlers", __name__)


def wants_json():
    """Return True when the current request expects a JSON answer."""
    return request.is_json or request.path.endswith("/json")


def error_response(message, status_code, template="error.html"):
    """Build the error answer in the format the caller expects."""
    if wants_json():
        return jsonify({"status": "error", "message": message}), status_code
    return render_template(template, error=message), status_code


@error_handlers_bp.app_errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Sign-in failures are always reported as JSON to the sign-in script."""
    current_app.logger.warning(f"Authentication Error: {error.message}")
    return (
        jsonify({"status": "error", "message": error.message}),
        error.status_code,
    )


@error_handlers_bp.app_errorhandler(NotFoundError)
def handle_not_found_error(error):
    """Unknown tournament ids and similar lookups."""
    current_app.logger.warning(f"Not Found Error: {error.message}")
    return error_response(error.message, error.status_code, "404.html")


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Validation failures and any other application error."""
    if error.status_code < 500:
        log = current_app.logger.warning
    else:
        log = current_app.logger.error
    log(f"{type(error).__name__}: {error.message}")
    return error_response(error.message, error.status_code)


@error_handlers_bp.app_errorhandler(404)
def handle_404(e):
    """Routes that don't exist."""
    return error_response("Page not found.", 404, "404.html")


@error_handlers_bp.app_errorhandler(500)
def handle_500(e):
    current_app.logger.error(f"Internal Server Error: {e}")
    if wants_json():
        return jsonify({"status": "error", "message": "Server error."}), 500
    return render_template("500.html"), 500


@error_handlers_bp.app_errorhandler(CSRFError)
def handle_csrf_error(e):
    """
    An expired session or a stale form. Browsers go back where they came from;
    the sign-in script gets a message it can show.
    """
    current_app.logger.warning(f"CSRF Error: {e.description}")
    message = "Your session may have expired. Please try your action again."
    if wants_json():
        return jsonify({"status": "error", "message": message}), 400
    flash(message, "warning")
    return redirect(request.referrer or url_for("tournament.list_tournaments"))
