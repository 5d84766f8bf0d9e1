"""Data models for the tournament blueprint."""

from __future__ import annotations

from typing import Optional, TypedDict

from foodcup.core.types import FirestoreDocument


class Match(TypedDict):
    """One pairwise comparison inside a round."""

    id: str
    a: Optional[str]
    b: Optional[str]
    winner: Optional[str]


Round = list[Match]


class Reward(TypedDict, total=False):
    """The outcome of the draw made when a tournament finishes."""

    reward: str
    code: str


class Tournament(TypedDict, total=False):
    """A tournament as kept in the local store."""

    id: str
    title: str
    description: str
    locationTag: str
    size: int
    entries: list[str]
    rounds: list[Round]
    currentRoundIndex: int
    isFinished: bool
    winner: str
    rewardMode: str
    rewardsPool: list[str]
    createdAt: int
    reward: Reward
    creatorName: str
    creatorEmail: str


class TournamentRecord(FirestoreDocument, total=False):
    """The creation metadata mirrored to Firestore."""

    title: str
    description: str
    locationTag: str
    creatorName: str
    creatorEmail: str
    participants: list[str]


class Selection(TypedDict):
    """Result of a winner selection.

    ``applied`` is False when the pick was ignored; the tournament is then
    exactly as it was before the call.
    """

    applied: bool
    finished: bool
    reward: Optional[Reward]
