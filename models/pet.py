# models/pet.py
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional

from services.rules import Rules, clamp

STATS = ("hunger", "energy", "happiness")
ACTIONS = ("feed", "sleep", "play")

DEFAULT_AVATAR = "dog"
AVATARS: Dict[str, str] = {
    "dog": "🐶",
    "cat": "🐱",
    "bird": "🐦",
    "turtle": "🐢",
}
EVOLVED_AVATARS: Dict[str, str] = {
    "dog": "🦄",
    "cat": "🦁",
    "bird": "🦜",
    "turtle": "🐉",
}


def normalize_avatar(value: object) -> str:
    """Return value if it is a known avatar id, else the default avatar."""
    return value if isinstance(value, str) and value in AVATARS else DEFAULT_AVATAR


def avatar_emoji(avatar: str, evolved: bool = False) -> str:
    """Emoji for an avatar id; unknown ids draw as the default pet."""
    table = EVOLVED_AVATARS if evolved else AVATARS
    return table.get(avatar, table[DEFAULT_AVATAR])


def normalize_name(value: object) -> Optional[str]:
    """
    Trim and truncate a pet name to the allowed length.

    Returns None when nothing printable is left.
    """
    if not isinstance(value, str):
        return None
    name = value.strip()[: Rules.NAME_MAX_LEN].strip()
    return name or None


def _as_int(value: object, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return default


@dataclass(frozen=True)
class PetStats:
    """
    Snapshot of the pet's needs and progression.

    Fields:
        hunger: Fullness meter, 0–100 (higher = fuller).
        energy: Rest meter, 0–100.
        happiness: Mood meter, 0–100.
        evolved: One-way progression flag.
        avatar: Avatar id, one of AVATARS.
    """
    hunger: int = Rules.STAT_MAX
    energy: int = Rules.STAT_MAX
    happiness: int = Rules.STAT_MAX
    evolved: bool = False
    avatar: str = DEFAULT_AVATAR

    def clamped(self) -> "PetStats":
        """Return a copy with every numeric field limited to [0, 100]."""
        return replace(
            self,
            hunger=clamp(int(self.hunger)),
            energy=clamp(int(self.energy)),
            happiness=clamp(int(self.happiness)),
            evolved=bool(self.evolved),
            avatar=normalize_avatar(self.avatar),
        )

    def with_delta(self, stat: str, delta: int) -> "PetStats":
        """Return a copy with delta added to one stat (unclamped)."""
        if stat not in STATS:
            raise ValueError(f"unknown stat: {stat!r}")
        return replace(self, **{stat: getattr(self, stat) + delta})

    def with_all(self, delta: int) -> "PetStats":
        """Return a copy with delta added to hunger, energy and happiness."""
        return replace(
            self,
            hunger=self.hunger + delta,
            energy=self.energy + delta,
            happiness=self.happiness + delta,
        )

    def all_above(self, threshold: int) -> bool:
        return self.hunger > threshold and self.energy > threshold and self.happiness > threshold

    @property
    def mood(self) -> str:
        """'sad' if any need is empty, 'happy' if all are high, else 'normal'."""
        if min(self.hunger, self.energy, self.happiness) == Rules.STAT_MIN:
            return "sad"
        if self.all_above(Rules.EVOLUTION_THRESHOLD):
            return "happy"
        return "normal"

    def to_dict(self) -> Dict[str, object]:
        """Serialize to a plain dict suitable for JSON storage."""
        return {
            "hunger": self.hunger,
            "energy": self.energy,
            "happiness": self.happiness,
            "evolved": self.evolved,
            "avatarId": self.avatar,
        }

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "PetStats":
        """
        Deserialize from a dict produced by to_dict().

        Missing or mistyped fields take their defaults and numbers are
        clamped, so any JSON object yields a valid PetStats.
        """
        if not isinstance(d, dict):
            raise ValueError("stats payload must be a JSON object.")
        avatar = d.get("avatarId", d.get("avatar", DEFAULT_AVATAR))
        return PetStats(
            hunger=_as_int(d.get("hunger"), Rules.STAT_MAX),
            energy=_as_int(d.get("energy"), Rules.STAT_MAX),
            happiness=_as_int(d.get("happiness"), Rules.STAT_MAX),
            evolved=d.get("evolved") is True,
            avatar=normalize_avatar(avatar),
        ).clamped()


@dataclass(frozen=True)
class PetProfile:
    """Name and avatar chosen at onboarding."""
    name: str
    avatar: str = DEFAULT_AVATAR

    def __post_init__(self) -> None:
        """Validate the name length and avatar id."""
        if not self.name or len(self.name) > Rules.NAME_MAX_LEN:
            raise ValueError(f"name must be 1-{Rules.NAME_MAX_LEN} characters.")
        if self.avatar not in AVATARS:
            raise ValueError(f"unknown avatar: {self.avatar!r}")
