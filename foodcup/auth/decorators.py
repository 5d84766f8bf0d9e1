"""Decorators for the auth blueprint."""

from functools import wraps

from flask import flash, redirect, request, session, url_for


def login_required(f):
    """Redirect to the sign-in page if the user is not signed in.

    Usage:
    @login_required
    def protected_view():
        ...
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in first.", "info")
            return redirect(url_for("auth.login", next=request.path))
        return f(*args, **kwargs)

    return decorated_function
