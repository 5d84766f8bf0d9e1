"""Reward draw made when a tournament finishes."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from foodcup.constants import (
    COUPON_ALPHABET,
    COUPON_CHANCE,
    COUPON_LABEL,
    COUPON_LENGTH,
    COUPON_PREFIX,
    FALLBACK_REWARD,
    REWARD_MODE_RANDOM,
)

if TYPE_CHECKING:
    from .models import Reward, Tournament


def generate_coupon(rng: random.Random | None = None) -> str:
    """Return a coupon code such as ``FOOD-7KQ2M9XA``.

    Codes are neither unique nor unpredictable; they only dress up the draw.
    """
    rng = rng or random  # type: ignore[assignment]
    code = "".join(rng.choice(COUPON_ALPHABET) for _ in range(COUPON_LENGTH))
    return f"{COUPON_PREFIX}-{code}"


def resolve_reward(
    tournament: Tournament, rng: random.Random | None = None
) -> Reward:
    """Draw the reward for a tournament that has just finished."""
    rng = rng or random  # type: ignore[assignment]
    pool = tournament.get("rewardsPool") or []
    reward = rng.choice(pool) if pool else FALLBACK_REWARD

    mode = tournament.get("rewardMode", REWARD_MODE_RANDOM)
    chance = COUPON_CHANCE.get(mode, COUPON_CHANCE[REWARD_MODE_RANDOM])
    if rng.random() < chance:
        return {"reward": COUPON_LABEL, "code": generate_coupon(rng)}
    return {"reward": reward}
