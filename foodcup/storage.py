"""Local persistence for the tournament list.

The whole list lives as one JSON document in a keyed slot. It is read once
when the store is created and rewritten in full after every change.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from flask import current_app

from .constants import STORAGE_KEY

if TYPE_CHECKING:
    from .tournament.models import Tournament

logger = logging.getLogger(__name__)

Seeder = Callable[[], "list[Tournament]"]
Transition = Callable[["Tournament"], bool]


class KeyValueSlot(Protocol):
    """A place to keep one string value per key."""

    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...


class MemorySlot:
    """Dict backed slot, handy for tests and throwaway apps."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class FileSlot:
    """Slot keeping each key in ``<directory>/<key>.json``."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def read(self, key: str) -> Optional[str]:
        try:
            with open(self.path(key), encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write(self, key: str, value: str) -> None:
        os.makedirs(self.directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self.path(key))
        except BaseException:
            os.unlink(tmp_path)
            raise


def dumps(tournaments: list[Tournament]) -> str:
    """Serialize tournaments to the persisted representation."""
    return json.dumps(tournaments, ensure_ascii=False)


REQUIRED_FIELDS = (
    "id",
    "title",
    "size",
    "entries",
    "rounds",
    "currentRoundIndex",
    "isFinished",
    "rewardMode",
    "rewardsPool",
    "createdAt",
)


def is_well_formed(tournament: dict[str, Any]) -> bool:
    """Return True when a stored tournament can be played back."""
    if any(field not in tournament for field in REQUIRED_FIELDS):
        return False
    rounds = tournament["rounds"]
    index = tournament["currentRoundIndex"]
    return (
        isinstance(rounds, list)
        and len(rounds) > 0
        and all(isinstance(r, list) for r in rounds)
        and isinstance(index, int)
        and 0 <= index < len(rounds)
    )


def loads(payload: str | None) -> list[Tournament]:
    """Parse the persisted representation.

    Returns an empty list for a missing or malformed payload. Entries that
    lack tournament fields are dropped with a warning.
    """
    if not payload:
        return []
    try:
        data: Any = json.loads(payload)
    except ValueError as e:
        logger.warning(f"Discarding malformed tournament payload: {e}")
        return []
    if not isinstance(data, list) or not all(isinstance(t, dict) for t in data):
        logger.warning("Discarding tournament payload that is not a list of objects")
        return []

    tournaments = [t for t in data if is_well_formed(t)]
    if len(tournaments) < len(data):
        logger.warning(
            f"Dropped {len(data) - len(tournaments)} malformed stored tournaments"
        )
    return tournaments


class TournamentStore:
    """Owns the canonical tournament list.

    Readers get deep copies taken under the store lock, so nothing outside
    the store holds a reference into the list. The only way to change a
    tournament is ``apply``, which runs a transition on a private copy and
    swaps it in once the transition finishes.
    """

    def __init__(
        self,
        slot: KeyValueSlot,
        key: str = STORAGE_KEY,
        seeder: Seeder | None = None,
    ) -> None:
        self.slot = slot
        self.key = key
        self.seeder = seeder
        self._lock = threading.Lock()
        self._tournaments: list[Tournament] = []

    def load(self) -> list[Tournament]:
        """Read the list from the slot, seeding it on first run."""
        with self._lock:
            self._tournaments = loads(self.slot.read(self.key))
            if not self._tournaments and self.seeder is not None:
                self._tournaments = self.seeder()
                logger.info(f"Seeded {len(self._tournaments)} sample tournaments")
                self._save()
            return copy.deepcopy(self._tournaments)

    def save(self) -> None:
        """Rewrite the whole list to the slot."""
        with self._lock:
            self._save()

    def _save(self) -> None:
        self.slot.write(self.key, dumps(self._tournaments))

    def _index(self, tournament_id: str) -> int | None:
        for i, t in enumerate(self._tournaments):
            if t.get("id") == tournament_id:
                return i
        return None

    def all(self) -> list[Tournament]:
        """Return every tournament, newest first."""
        with self._lock:
            return copy.deepcopy(self._tournaments)

    def get(self, tournament_id: str) -> Tournament | None:
        """Return a copy of the tournament with the given id, if any."""
        with self._lock:
            i = self._index(tournament_id)
            return None if i is None else copy.deepcopy(self._tournaments[i])

    def search(self, query: str | None) -> list[Tournament]:
        """Return tournaments whose title or location tag contains ``query``."""
        if not query or not query.strip():
            return self.all()
        q = query.strip().lower()
        with self._lock:
            return copy.deepcopy(
                [
                    t
                    for t in self._tournaments
                    if q in t.get("title", "").lower()
                    or q in (t.get("locationTag") or "").lower()
                ]
            )

    def add(self, tournament: Tournament) -> None:
        """Put a copy of a new tournament at the front of the list and save."""
        with self._lock:
            self._tournaments.insert(0, copy.deepcopy(tournament))
            self._save()

    def apply(self, tournament_id: str, transition: Transition) -> bool:
        """Run ``transition`` on a stored tournament and save if it changed it.

        The transition works on a copy. The stored tournament is replaced
        only when the transition returns True; if it returns False or raises,
        the list is left as it was. Returns whatever the transition reported,
        or False when no tournament has the given id.
        """
        with self._lock:
            i = self._index(tournament_id)
            if i is None:
                return False
            working = copy.deepcopy(self._tournaments[i])
            changed = transition(working)
            if changed:
                self._tournaments[i] = working
                self._save()
            return changed


def get_store() -> TournamentStore:
    """Return the store the running app was created with."""
    return current_app.extensions["tournament_store"]
