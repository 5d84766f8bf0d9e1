"""Best-effort mirroring of tournament and user metadata to Firestore.

Nothing here is read back into the bracket engine. Writes run on a
background thread; a failed write is logged and dropped.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, cast

from firebase_admin import firestore

from .constants import TOURNAMENTS_COLLECTION, USERS_COLLECTION

if TYPE_CHECKING:
    from flask import Flask
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from .tournament.models import Tournament, TournamentRecord
    from .user.models import User

logger = logging.getLogger(__name__)


def record_tournament(db: Client, tournament: Tournament) -> None:
    """Upsert the creation record of a tournament, keyed by its id."""
    creator_email = tournament.get("creatorEmail", "")
    record: TournamentRecord = {
        "title": tournament["title"],
        "description": tournament.get("description") or "",
        "locationTag": tournament.get("locationTag") or "",
        "creatorName": tournament.get("creatorName", ""),
        "creatorEmail": creator_email,
        "createdAt": firestore.SERVER_TIMESTAMP,
        # The creator is the first participant
        "participants": [creator_email],
    }
    db.collection(TOURNAMENTS_COLLECTION).document(tournament["id"]).set(record)


def record_user(db: Client, uid: str, name: str, email: str) -> bool:
    """Upsert a signed-in user's record, keyed by the provider's user id.

    The spoon counter starts at zero on first sign-in and is left alone
    afterwards. Returns True when the record was created.
    """
    user_ref = db.collection(USERS_COLLECTION).document(uid)
    user_doc = cast("DocumentSnapshot", user_ref.get())
    if user_doc.exists:
        user_ref.update(
            {"name": name, "email": email, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        return False

    user_ref.set(
        {
            "name": name,
            "email": email,
            "spoons": 0,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        },
        merge=True,
    )
    return True


def add_spoons(db: Client, uid: str, amount: int) -> None:
    """Increment a user's spoon counter."""
    db.collection(USERS_COLLECTION).document(uid).update(
        {
            "spoons": firestore.Increment(amount),
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
    )


def get_user(db: Client, uid: str) -> User | None:
    """Fetch a user's record, or None if it does not exist."""
    user_doc = cast(
        "DocumentSnapshot", db.collection(USERS_COLLECTION).document(uid).get()
    )
    if not user_doc.exists:
        return None
    data = cast("User", user_doc.to_dict() or {})
    data["id"] = uid
    return data


def mirror_in_background(
    app: Flask, write: Callable[..., Any], *args: Any
) -> threading.Thread | None:
    """Run ``write(db, *args)`` without blocking the caller.

    Skipped entirely when ``CLOUD_MIRROR_ENABLED`` is off. With
    ``CLOUD_MIRROR_ASYNC`` off the write runs inline and no thread is
    returned.
    """
    if not app.config.get("CLOUD_MIRROR_ENABLED"):
        return None

    def task() -> None:
        """Perform the write inside an app context, logging any failure."""
        with app.app_context():
            try:
                write(firestore.client(), *args)
            except Exception as e:
                logger.error(f"Cloud mirror write {write.__name__} failed: {e}")

    if not app.config.get("CLOUD_MIRROR_ASYNC", True):
        task()
        return None

    thread = threading.Thread(target=task, daemon=True)
    thread.start()
    return thread
