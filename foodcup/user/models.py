"""Data models for the user blueprint."""

from __future__ import annotations

from typing import TypedDict

from foodcup.core.types import FirestoreDocument


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    name: str
    email: str
    spoons: int


class SessionUser(TypedDict):
    """The signed-in user as reported by the identity provider."""

    uid: str
    name: str
    email: str
