import json

from flask import (
    Response,
    current_app,
    flash,
    g,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from foodcup.cloud import mirror_in_background, record_user
from foodcup.core.types import APIResponse
from foodcup.utils import safe_next_url

from . import bp
from .utils import start_session, verify_sign_in


@bp.route("/login", methods=["GET"])
def login():
    """
    Renders the sign-in page.
    The actual sign-in is handled by the Firebase client-side SDK, which
    posts the resulting ID token to session_login.
    """
    if g.user:
        return redirect(url_for("tournament.list_tournaments"))
    return render_template(
        "auth/login.html", next=safe_next_url(request.args.get("next"))
    )


@bp.route("/session_login", methods=["POST"])
def session_login():
    """
    Called from the client after a successful Firebase sign-in.
    It receives the ID token, verifies it and creates a server-side session.
    """
    payload = request.get_json(silent=True) or {}
    user = verify_sign_in(payload.get("idToken"))
    start_session(user)
    current_app.logger.info(f"User {user['uid']} signed in")

    mirror_in_background(
        current_app._get_current_object(),
        record_user,
        user["uid"],
        user["name"],
        user["email"],
    )
    response: APIResponse = {
        "status": "success",
        "message": f"Welcome, {user['name']}!",
        "data": {"uid": user["uid"], "name": user["name"]},
    }
    return jsonify(response)


@bp.route("/logout")
def logout():
    """
    Signing out of Firebase itself is done by the client-side SDK.
    This route clears the server-side session.
    """
    session.clear()
    flash("You have been signed out.", "success")
    return redirect(url_for("tournament.list_tournaments"))


@bp.route("/firebase-config.js")
def firebase_config():
    """Serve the client SDK configuration as a script."""
    api_key = current_app.config.get("FIREBASE_API_KEY")
    if not api_key:
        current_app.logger.error(
            "FIREBASE_API_KEY is not set. Sign-in will not be available."
        )
        error_script = 'console.error("Firebase API key is missing. Please set the FIREBASE_API_KEY environment variable.");'
        return Response(error_script, mimetype="application/javascript")

    project_id = current_app.config.get("FIREBASE_PROJECT_ID")
    config = {
        "apiKey": api_key,
        "authDomain": current_app.config.get("FIREBASE_AUTH_DOMAIN")
        or f"{project_id}.firebaseapp.com",
        "projectId": project_id,
        "appId": current_app.config.get("FIREBASE_APP_ID"),
    }
    js_config = f"const firebaseConfig = {json.dumps(config)};"
    return Response(js_config, mimetype="application/javascript")
