"""Service layer for tournament business logic."""

from __future__ import annotations

import re
import time
import uuid
from typing import TYPE_CHECKING, Any

from flask import current_app

from foodcup.cloud import add_spoons, mirror_in_background, record_tournament
from foodcup.constants import (
    DEFAULT_REWARDS,
    MIN_ENTRIES,
    REWARD_MODE_RANDOM,
    REWARD_MODES,
    SPOONS_PER_FINISH,
)
from foodcup.errors import NotFoundError, ValidationError

from .bracket import build_rounds, normalize, select_winner

if TYPE_CHECKING:
    import random

    from foodcup.storage import TournamentStore
    from foodcup.user.models import SessionUser

    from .models import Selection, Tournament

_SEPARATORS = re.compile(r"\n|,")


def parse_lines(text: str | None) -> list[str]:
    """Split free text on newlines and commas, dropping blank items."""
    if not text:
        return []
    return [item.strip() for item in _SEPARATORS.split(text) if item.strip()]


def build_tournament(
    title: str,
    entries: list[str],
    reward_mode: str = REWARD_MODE_RANDOM,
    rewards_pool: list[str] | None = None,
    description: str | None = None,
    location_tag: str | None = None,
) -> Tournament:
    """Build a fresh, unplayed tournament with its rounds seeded."""
    tournament: Tournament = {
        "id": uuid.uuid4().hex,
        "title": title,
        "size": normalize(len(entries)),
        "entries": list(entries),
        "rounds": build_rounds(entries),
        "currentRoundIndex": 0,
        "isFinished": False,
        "rewardMode": reward_mode,
        "rewardsPool": list(DEFAULT_REWARDS if rewards_pool is None else rewards_pool),
        "createdAt": int(time.time() * 1000),
    }
    if description:
        tournament["description"] = description
    if location_tag:
        tournament["locationTag"] = location_tag
    return tournament


class TournamentService:
    """Handles business logic for tournaments."""

    @staticmethod
    def validate(data: dict[str, Any]) -> tuple[str, list[str]]:
        """Check creation input and return the cleaned title and entries."""
        title = (data.get("title") or "").strip()
        entries = parse_lines(data.get("entries"))
        if not title or len(entries) < MIN_ENTRIES:
            raise ValidationError(
                f"Enter a title and at least {MIN_ENTRIES} entries."
            )
        if data.get("reward_mode", REWARD_MODE_RANDOM) not in REWARD_MODES:
            raise ValidationError("Unknown reward mode.")
        return title, entries

    @staticmethod
    def create_tournament(
        store: TournamentStore,
        data: dict[str, Any],
        creator: SessionUser | None = None,
    ) -> Tournament:
        """Validate input, build the bracket, store it and mirror it.

        Raises:
            ValidationError: If the title is missing or there are too few
                entries. Nothing is stored in that case.
        """
        title, entries = TournamentService.validate(data)
        rewards_pool = data.get("rewards_pool")
        tournament = build_tournament(
            title=title,
            entries=entries,
            reward_mode=data.get("reward_mode") or REWARD_MODE_RANDOM,
            rewards_pool=(
                parse_lines(rewards_pool)
                if isinstance(rewards_pool, str)
                else rewards_pool
            ),
            description=(data.get("description") or "").strip(),
            location_tag=(data.get("location_tag") or "").strip(),
        )
        if creator:
            tournament["creatorName"] = creator["name"]
            tournament["creatorEmail"] = creator["email"]

        store.add(tournament)
        current_app.logger.info(
            f"Created tournament {tournament['id']} with {len(entries)} entries"
        )

        if creator:
            mirror_in_background(
                current_app._get_current_object(),  # type: ignore[attr-defined]
                record_tournament,
                tournament,
            )
        return tournament

    @staticmethod
    def get_tournament(store: TournamentStore, tournament_id: str) -> Tournament:
        """Fetch a tournament or raise NotFoundError."""
        tournament = store.get(tournament_id)
        if tournament is None:
            raise NotFoundError("Tournament not found.")
        return tournament

    @staticmethod
    def pick_winner(
        store: TournamentStore,
        tournament_id: str,
        match_id: str,
        side: str,
        user: SessionUser | None = None,
        rng: random.Random | None = None,
    ) -> Selection:
        """Apply one winner selection and persist the result.

        Ignored picks leave the stored tournament untouched and are reported
        with ``applied=False``.
        """
        TournamentService.get_tournament(store, tournament_id)
        outcome: Selection = {"applied": False, "finished": False, "reward": None}

        def transition(tournament: Tournament) -> bool:
            outcome.update(select_winner(tournament, match_id, side, rng))
            return outcome["applied"]

        store.apply(tournament_id, transition)

        if outcome["finished"]:
            current_app.logger.info(f"Tournament {tournament_id} finished")
            if user:
                mirror_in_background(
                    current_app._get_current_object(),  # type: ignore[attr-defined]
                    add_spoons,
                    user["uid"],
                    SPOONS_PER_FINISH,
                )
        return outcome
