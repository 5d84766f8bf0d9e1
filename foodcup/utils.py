"""Utility functions for the application."""

import datetime

from .constants import REWARD_MODE_WEIGHTED


def format_created_at(created_at):
    """Format an epoch-milliseconds timestamp as a short date."""
    if not created_at:
        return ""
    try:
        moment = datetime.datetime.fromtimestamp(created_at / 1000)
    except (TypeError, ValueError, OverflowError, OSError):
        return ""
    return moment.strftime("%b %d, %Y")


def reward_mode_label(mode):
    """Human label for a reward mode."""
    return "Weighted" if mode == REWARD_MODE_WEIGHTED else "Random"


def safe_next_url(url):
    """Return ``url`` if it is a local path, otherwise None."""
    if url and url.startswith("/") and not url.startswith("//"):
        return url
    return None
