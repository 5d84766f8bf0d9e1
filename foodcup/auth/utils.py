"""Helpers around the identity provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import auth
from flask import session

from foodcup.errors import AuthenticationError

if TYPE_CHECKING:
    from foodcup.user.models import SessionUser


def verify_sign_in(id_token: Any) -> SessionUser:
    """Verify a Firebase ID token and return the user it identifies.

    Raises:
        AuthenticationError: If the token is missing or rejected.
    """
    if not id_token or not isinstance(id_token, str):
        raise AuthenticationError("Missing sign-in token.")
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (
        ValueError,
        auth.InvalidIdTokenError,
        auth.CertificateFetchError,
        auth.UserDisabledError,
    ) as e:
        raise AuthenticationError("Sign-in failed. Please try again.") from e

    uid = decoded_token["uid"]
    email = decoded_token.get("email") or ""
    # Not every provider shares a display name
    name = decoded_token.get("name") or email.split("@")[0] or "Guest"
    return {"uid": uid, "name": name, "email": email}


def start_session(user: SessionUser) -> None:
    """Remember the signed-in user in the Flask session."""
    session["user_id"] = user["uid"]
    session["name"] = user["name"]
    session["email"] = user["email"]


def load_session_user() -> SessionUser | None:
    """Return the signed-in user from the session, or None."""
    user_id = session.get("user_id")
    if user_id is None:
        return None
    return {
        "uid": user_id,
        "name": session.get("name", ""),
        "email": session.get("email", ""),
    }
