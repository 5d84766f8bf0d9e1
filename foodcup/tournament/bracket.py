"""Single elimination bracket engine.

The functions here are pure bookkeeping over the ``Match``/``Round`` dicts in
``models``. ``select_winner`` is the only one that mutates its argument; the
store is the single writer that hands it a tournament to change.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from foodcup.constants import BRACKET_SIZES, BYE, MAX_BRACKET_SIZE

from .rewards import resolve_reward

if TYPE_CHECKING:
    import random

    from .models import Match, Round, Selection, Tournament

SIDES = ("a", "b")


def new_match(a: str | None = None, b: str | None = None) -> Match:
    """Return an undecided match with a fresh id."""
    return {"id": uuid.uuid4().hex, "a": a, "b": b, "winner": None}


def normalize(entry_count: int) -> int:
    """Return the smallest supported bracket size that fits ``entry_count``.

    Counts above the largest size are clamped to it.
    """
    for size in BRACKET_SIZES:
        if entry_count <= size:
            return size
    return MAX_BRACKET_SIZE


def pad_entries(entries: list[str]) -> list[str]:
    """Pad ``entries`` with byes up to the bracket size.

    Each bye takes the second slot of one of the leading pairs, so the byes
    are spread over the first round instead of meeting each other.
    """
    size = normalize(len(entries))
    entries = list(entries[:size])
    byes = size - len(entries)

    padded: list[str] = []
    for entry in entries[:byes]:
        padded.extend([entry, BYE])
    padded.extend(entries[byes:])
    while len(padded) < size:
        padded.append(BYE)
    return padded


def resolve_bye(match: Match) -> None:
    """Advance the non-bye side of a match against a bye."""
    if match["a"] == BYE:
        match["winner"] = match["b"]
    elif match["b"] == BYE:
        match["winner"] = match["a"]


def build_rounds(entries: list[str]) -> list[Round]:
    """Build every round of the bracket for ``entries``.

    Round 0 is seeded from the padded entry list with bye matches already
    decided. The later rounds are placeholders whose sides are filled in as
    earlier rounds fold; their lengths halve down to the single final match.
    """
    padded = pad_entries(entries)
    first = [new_match(padded[i], padded[i + 1]) for i in range(0, len(padded), 2)]
    for match in first:
        resolve_bye(match)

    rounds = [first]
    matches_in_round = len(first) // 2
    while matches_in_round >= 1:
        rounds.append([new_match() for _ in range(matches_in_round)])
        matches_in_round //= 2
    return rounds


def fold_round(round_: Round) -> Round:
    """Pair consecutive winners of a decided round into the next round."""
    return [
        new_match(round_[i]["winner"], round_[i + 1]["winner"])
        for i in range(0, len(round_) - 1, 2)
    ]


def is_round_decided(round_: Round) -> bool:
    """Return True when every match of the round has a winner."""
    return all(match["winner"] for match in round_)


def is_playable(match: Match) -> bool:
    """Return True when a winner can still be picked for ``match``."""
    return (
        not match["winner"]
        and bool(match["a"])
        and bool(match["b"])
        and BYE not in (match["a"], match["b"])
    )


def current_round(tournament: Tournament) -> Round:
    """Return the round currently being played."""
    return tournament["rounds"][tournament["currentRoundIndex"]]


def progress_percent(tournament: Tournament) -> int:
    """Return how far the tournament has advanced, as a percentage."""
    if tournament.get("isFinished"):
        return 100
    last_index = len(tournament["rounds"]) - 1
    if last_index <= 0:
        return 0
    return round(tournament["currentRoundIndex"] / last_index * 100)


def select_winner(
    tournament: Tournament,
    match_id: str,
    side: str,
    rng: random.Random | None = None,
) -> Selection:
    """Pick ``side`` ("a" or "b") as the winner of a match in the current round.

    The pick is ignored, leaving ``tournament`` untouched, when the tournament
    is finished, the match is not in the current round, either side is empty
    or a bye, the match is already decided, or ``side`` is unknown.

    When the pick completes the current round, the round is folded into the
    next one. Completing the final round finishes the tournament and draws
    its reward.
    """
    ignored: Selection = {"applied": False, "finished": False, "reward": None}
    if tournament.get("isFinished") or side not in SIDES:
        return ignored

    matches = current_round(tournament)
    match = next((m for m in matches if m["id"] == match_id), None)
    if match is None or not is_playable(match):
        return ignored

    match["winner"] = match[side]  # type: ignore[literal-required]

    if not is_round_decided(matches):
        return {"applied": True, "finished": False, "reward": None}

    index = tournament["currentRoundIndex"]
    if index == len(tournament["rounds"]) - 1:
        tournament["isFinished"] = True
        tournament["winner"] = matches[0]["winner"] or ""
        reward = resolve_reward(tournament, rng)
        tournament["reward"] = reward
        return {"applied": True, "finished": True, "reward": reward}

    tournament["rounds"][index + 1] = fold_round(matches)
    tournament["currentRoundIndex"] = index + 1
    return {"applied": True, "finished": False, "reward": None}
