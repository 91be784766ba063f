# services/rules.py
"""
Balance constants for the pet simulation.

Provides the timer intervals, stat deltas, thresholds and the random reward
table that define how the pet behaves. This module is pure Python,
dependency-free, and intended to be imported wherever a rule value is needed.
"""

from dataclasses import dataclass
from typing import Final, Tuple


@dataclass(frozen=True)
class RewardEvent:
    """One row of the random reward table: flavor text plus a stat bonus."""
    message: str
    stat: str
    delta: int


class Rules:
    """Namespace container for simulation constants. Not meant to be instantiated."""

    # Stat bounds
    STAT_MIN: Final[int] = 0
    STAT_MAX: Final[int] = 100

    # Decay
    DECAY_INTERVAL_S: Final[float] = 10.0    # Every 10 seconds...
    DECAY_AMOUNT: Final[int] = 4             # ...each stat loses 4

    # Random reward events
    REWARD_INTERVAL_S: Final[float] = 30.0
    REWARD_EVENTS: Final[Tuple[RewardEvent, ...]] = (
        RewardEvent("Your pet found a toy!", "happiness", 5),
        RewardEvent("Your pet fell asleep for a bit.", "energy", 5),
        RewardEvent("Your pet is looking for attention.", "happiness", 5),
        RewardEvent("Your pet found a snack!", "hunger", 5),
        RewardEvent("Your pet took a quick nap.", "energy", 3),
    )

    # Evolution
    EVOLUTION_THRESHOLD: Final[int] = 80     # Strictly above, for all three stats
    EVOLUTION_TIME_S: Final[float] = 60.0

    # Interactions
    ACTION_BOOST: Final[int] = 18
    ANIMATION_S: Final[float] = 0.7
    TOAST_S: Final[float] = 1.8
    CONFETTI_S: Final[float] = 3.5

    # Secret ritual
    SECRET_PATTERN: Final[Tuple[str, ...]] = ("feed", "feed", "feed", "play", "sleep")
    SECRET_WINDOW_S: Final[float] = 60.0
    SECRET_BONUS: Final[int] = 10

    # Profile
    NAME_MAX_LEN: Final[int] = 16

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is not instantiable")


def clamp(n: int, lo: int = Rules.STAT_MIN, hi: int = Rules.STAT_MAX) -> int:
    """
    Clamp an integer value between inclusive lower and upper bounds.

    Args:
        n: The value to clamp.
        lo: Minimum allowed value (defaults to the stat floor).
        hi: Maximum allowed value (defaults to the stat ceiling).

    Returns:
        int: n limited to the range [lo, hi].

    Examples:
        >>> clamp(120)
        100
        >>> clamp(-5)
        0
    """
    return max(lo, min(n, hi))
