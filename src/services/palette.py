"""
Profile color assignment.
"""
from typing import Sequence

from src.models.profile import Profile
from src.services.constants import PALETTE


def next_color(profiles: Sequence[Profile]) -> str:
    """
    Pick a display color for a new profile.

    Returns the first palette entry no existing profile uses. When every
    entry is taken, falls back to ``PALETTE[len(profiles) % len(PALETTE)]``,
    which may repeat a color.
    """
    used = {profile.color for profile in profiles}
    for color in PALETTE:
        if color not in used:
            return color
    return PALETTE[len(profiles) % len(PALETTE)]
