"""
Scoring - Final score and the high-score summary of a finished game.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any
import math
import uuid

from .settings import Difficulty
from .state import GameState, PlayerState


VICTORY = "Victory"
DEFEAT = "Defeat"


def raw_score(player: PlayerState) -> int:
    """Score before the difficulty multiplier."""
    scoring = player.scoring
    total = 0
    total += scoring.explore * 2
    total += scoring.champion * 3
    total += scoring.fortune * 2
    total += scoring.soul * 2

    total += player.stats.total * 5
    total += player.resources.gold // 2
    total += player.resources.mana
    total += len(player.items) * 5
    total += len(player.artifacts) * 10

    total += sum(q.bonus_points for q in player.quests if q.is_completed)
    return total


def calculate_score(player: PlayerState, difficulty: Difficulty) -> int:
    return math.floor(raw_score(player) * difficulty.score_multiplier)


def outcome(player: PlayerState) -> str:
    return VICTORY if player.is_alive else DEFEAT


def high_score_entry(
    state: GameState,
    player_name: str,
    entry_id: str | None = None,
    date: datetime | None = None,
) -> dict[str, Any]:
    """The summary the score store persists for one game."""
    player = state.player
    date = date or datetime.now(timezone.utc)
    return {
        "id": entry_id or uuid.uuid4().hex,
        "date": date.isoformat(),
        "player_name": player_name,
        "character_class": player.character_class.value,
        "difficulty": state.difficulty.value,
        "score": calculate_score(player, state.difficulty),
        "outcome": outcome(player),
        "stats": player.scoring.to_dict(),
        "history": [record.to_dict() for record in state.history],
    }
