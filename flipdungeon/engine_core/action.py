"""
Action System - Actions, payloads, and results.

Actions represent:
1. Card plays against a self action or a location (resolved by the resolver)
2. Ledger events (alignment shifts, shop, level ups, abilities, ...)
3. Turn flow (fate rewind, end turn, time warp)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import StatAttribute


class ActionKind(Enum):
    """What a card play is spent on."""
    REST = "rest"
    TRAIN = "train"
    LOOT = "loot"
    STUDY = "study"
    EXPLORE = "explore"


def action_key(kind: ActionKind, location_id: str | None = None) -> str:
    """'rest', 'train', ... or 'explore:<location_id>'. '?' when no kind was chosen."""
    if kind is None:
        return "?"
    if kind is ActionKind.EXPLORE:
        return f"explore:{location_id}"
    return kind.value


class ActionType(Enum):
    """Types of actions the reducer accepts."""
    # Resolution
    PLAY_CARDS = "play_cards"
    REWIND_FATE = "rewind_fate"
    END_TURN = "end_turn"

    # Ledger events
    DARK_PACT = "dark_pact"
    PURIFY = "purify"
    UPGRADE_STAT = "upgrade_stat"
    LEVEL_UP = "level_up"
    BUY_ITEM = "buy_item"
    MULLIGAN = "mulligan"
    ACTIVATE_ABILITY = "activate_ability"
    TIME_WARP = "time_warp"


class ErrorCode(str, Enum):
    """Why a transition was rejected."""
    INVALID_PHASE = "INVALID_PHASE"
    NO_CARDS = "NO_CARDS"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    TOO_MANY_CARDS = "TOO_MANY_CARDS"
    INSUFFICIENT_MANA = "INSUFFICIENT_MANA"
    INSUFFICIENT_GOLD = "INSUFFICIENT_GOLD"
    INSUFFICIENT_XP = "INSUFFICIENT_XP"
    INSUFFICIENT_HEALTH = "INSUFFICIENT_HEALTH"
    LOCATION_CLEARED = "LOCATION_CLEARED"
    UNKNOWN_LOCATION = "UNKNOWN_LOCATION"
    UNKNOWN_ITEM = "UNKNOWN_ITEM"
    INVALID_STAT = "INVALID_STAT"
    ON_COOLDOWN = "ON_COOLDOWN"
    ALREADY_REWOUND = "ALREADY_REWOUND"
    NOTHING_PENDING = "NOTHING_PENDING"
    NO_TURN_TO_WARP = "NO_TURN_TO_WARP"
    INVALID_ACTION = "INVALID_ACTION"


@dataclass(frozen=True)
class ActionPayload:
    """
    Parameters for an action.

    Different action types read different fields; validation happens in
    the reducer.
    """
    action_kind: ActionKind | None = None
    location_id: str | None = None
    card_ids: tuple[str, ...] = ()
    stat: StatAttribute | None = None
    item_name: str | None = None


@dataclass(frozen=True)
class Action:
    """A complete action to be applied to the game state."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @property
    def key(self) -> str:
        """Stable string form, used for logs and bot output."""
        p = self.payload
        if self.action_type is ActionType.PLAY_CARDS:
            return f"play {action_key(p.action_kind, p.location_id)} [{', '.join(p.card_ids)}]"
        if self.action_type is ActionType.UPGRADE_STAT:
            return f"upgrade_stat {p.stat.value if p.stat else '?'}"
        if self.action_type is ActionType.BUY_ITEM:
            return f"buy_item {p.item_name}"
        if self.action_type is ActionType.MULLIGAN:
            return f"mulligan {', '.join(p.card_ids)}"
        return self.action_type.value

    @classmethod
    def play(cls, kind: ActionKind, card_ids, location_id: str | None = None) -> Action:
        """Factory for a card play on a self action or a location."""
        return cls(
            action_type=ActionType.PLAY_CARDS,
            payload=ActionPayload(action_kind=kind, location_id=location_id, card_ids=tuple(card_ids)),
        )

    @classmethod
    def explore(cls, location_id: str, card_ids) -> Action:
        return cls.play(ActionKind.EXPLORE, card_ids, location_id=location_id)

    @classmethod
    def rewind_fate(cls) -> Action:
        return cls(action_type=ActionType.REWIND_FATE)

    @classmethod
    def end_turn(cls) -> Action:
        return cls(action_type=ActionType.END_TURN)

    @classmethod
    def dark_pact(cls) -> Action:
        return cls(action_type=ActionType.DARK_PACT)

    @classmethod
    def purify(cls) -> Action:
        return cls(action_type=ActionType.PURIFY)

    @classmethod
    def upgrade_stat(cls, stat: StatAttribute) -> Action:
        return cls(action_type=ActionType.UPGRADE_STAT, payload=ActionPayload(stat=stat))

    @classmethod
    def level_up(cls) -> Action:
        return cls(action_type=ActionType.LEVEL_UP)

    @classmethod
    def buy_item(cls, item_name: str) -> Action:
        return cls(action_type=ActionType.BUY_ITEM, payload=ActionPayload(item_name=item_name))

    @classmethod
    def mulligan(cls, card_id: str) -> Action:
        return cls(action_type=ActionType.MULLIGAN, payload=ActionPayload(card_ids=(card_id,)))

    @classmethod
    def activate_ability(cls) -> Action:
        return cls(action_type=ActionType.ACTIVATE_ABILITY)

    @classmethod
    def time_warp(cls) -> Action:
        return cls(action_type=ActionType.TIME_WARP)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    A rejected action is not an exception: `success` is False, `error`
    explains why, and `new_state` is the unchanged input state.
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: ErrorCode | None = None

    # Human-readable changes, for the UI and the log
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def rejected(cls, state: Any, error: str, error_code: ErrorCode) -> ActionResult:
        """Create a rejected result that leaves the state untouched."""
        return cls(success=False, new_state=state, error=error, error_code=error_code)

    @classmethod
    def success_with_state(cls, state: Any, changes: list[str] | None = None) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
