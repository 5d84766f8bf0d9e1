"""Routes for the user blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, g, render_template

from foodcup.auth.decorators import login_required
from foodcup.cloud import get_user

from . import bp


@bp.route("/profile")
@login_required
def profile() -> Any:
    """Show the signed-in user's profile panel."""
    record = None
    try:
        record = get_user(firestore.client(), g.user["uid"])
    except Exception as e:
        # The panel still works from the session alone
        current_app.logger.error(f"Error loading profile for {g.user['uid']}: {e}")

    spoons = record.get("spoons", 0) if record else 0
    return render_template("user/profile.html", user=g.user, spoons=spoons)
