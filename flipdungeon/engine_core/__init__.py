"""
Engine Core - Deterministic turn resolution and progression.

The engine is the runtime that:
1. Manages GameState (cards, player, locations, clock)
2. Generates legal actions
3. Applies actions via the reducer
4. Resolves card plays and the location paths they advance
"""

from .state import GameState, GamePhase, PlayerState, AdventureLocation
from .action import Action, ActionKind, ActionType, ActionPayload, ActionResult, ErrorCode
from .catalog import Catalog
from .settings import Difficulty, GameSettings, DEFAULT_SETTINGS
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions
from .scoring import calculate_score

__all__ = [
    "GameState",
    "GamePhase",
    "PlayerState",
    "AdventureLocation",
    "Action",
    "ActionKind",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "Catalog",
    "Difficulty",
    "GameSettings",
    "DEFAULT_SETTINGS",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
    "calculate_score",
]
