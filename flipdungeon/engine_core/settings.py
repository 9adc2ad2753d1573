"""
Game Settings - Tunable rule constants and difficulty.

Settings arrive from an external config object (admin panel, API request,
JSON file). Keys may be camelCase or snake_case.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, asdict
from enum import Enum
from typing import Any
import re


class Difficulty(Enum):
    """Global difficulty. Shifts the dungeon card and the final score."""
    EASY = "Easy"
    NORMAL = "Normal"
    HARD = "Hard"

    def adjust(self, dungeon_value: int) -> int:
        """Easy: -2 (floored at 1). Hard: +2. Normal: unchanged."""
        if self is Difficulty.EASY:
            return max(1, dungeon_value - 2)
        if self is Difficulty.HARD:
            return dungeon_value + 2
        return dungeon_value

    @property
    def score_multiplier(self) -> float:
        return {Difficulty.EASY: 0.75, Difficulty.NORMAL: 1.0, Difficulty.HARD: 1.25}[self]

    @classmethod
    def parse(cls, value: str | Difficulty) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"Unknown difficulty: {value}")


@dataclass(frozen=True)
class GameSettings:
    """Rule constants. All values are plain integers."""
    initial_health: int = 10
    hand_size: int = 5
    max_rounds: int = 3
    turns_per_round: int = 5
    evil_threshold: int = -5
    good_threshold: int = 5
    xp_base_cost: int = 1  # stat upgrade cost = (stat + 1) * xp_base_cost
    xp_level_up_mult: int = 5  # level up cost = level * xp_level_up_mult
    mana_cost_per_extra_card: int = 1
    alignment_min: int = -10
    alignment_max: int = 10

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Setting {f.name} must be an integer, got {value!r}")
        if self.hand_size < 1:
            raise ValueError("hand_size must be at least 1")
        if self.max_rounds < 1 or self.turns_per_round < 1:
            raise ValueError("max_rounds and turns_per_round must be at least 1")
        if self.initial_health < 1:
            raise ValueError("initial_health must be at least 1")
        if self.alignment_min > self.alignment_max:
            raise ValueError("alignment_min must not exceed alignment_max")

    def clamp_alignment(self, alignment: int) -> int:
        return max(self.alignment_min, min(self.alignment_max, alignment))

    def play_cost(self, card_count: int) -> int:
        """Mana needed to play `card_count` cards at once."""
        return max(0, card_count - 1) * self.mana_cost_per_extra_card

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GameSettings:
        """
        Build settings from a partial mapping.

        Missing keys keep their defaults. Unknown keys raise ValueError.
        """
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name not in known:
                raise ValueError(f"Unknown setting: {key}")
            values[name] = value
        return cls(**values)


DEFAULT_SETTINGS = GameSettings()


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()
