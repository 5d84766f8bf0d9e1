"""Common utilities for tests."""

import unittest
from typing import Any, Optional
from unittest.mock import patch

from foodcup import create_app
from foodcup.storage import MemorySlot, TournamentStore
from foodcup.tournament.services import build_tournament

MOCK_USER = {"uid": "user1", "name": "Kim", "email": "kim@example.com"}

FOUR_ENTRIES = ["Gukbap", "Mandu", "Naengmyeon", "Tteokbokki"]


def make_store(tournaments: Optional[list[Any]] = None) -> TournamentStore:
    """Build a loaded in-memory store holding ``tournaments``."""
    store = TournamentStore(MemorySlot())
    store.load()
    for tournament in reversed(tournaments or []):
        store.add(tournament)
    return store


class AppTestCase(unittest.TestCase):
    """Base test case with an app backed by an in-memory store."""

    config: dict[str, Any] = {}

    def setUp(self) -> None:
        """Set up a test client around a fresh four-entry tournament."""
        patcher = patch("firebase_admin.initialize_app")
        patcher.start()
        self.addCleanup(patcher.stop)

        self.tournament = build_tournament("Lunch", FOUR_ENTRIES)
        self.store = make_store([self.tournament])
        self.app = create_app(
            {
                "TESTING": True,
                "WTF_CSRF_ENABLED": False,
                "SECRET_KEY": "test",
                **self.config,
            },
            store=self.store,
        )
        self.client = self.app.test_client()

    def sign_in(self, user: Optional[dict[str, str]] = None) -> None:
        """Put a signed-in user in the test client's session."""
        user = user or MOCK_USER
        with self.client.session_transaction() as sess:
            sess["user_id"] = user["uid"]
            sess["name"] = user["name"]
            sess["email"] = user["email"]
