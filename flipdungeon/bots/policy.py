"""
Bot Policy - Interface for bot decision-making.

A BotPolicy takes a game state and the legal actions and returns a
decision. Bots drive simulations and smoke tests; they see exactly what a
client sees through the action generator.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random
from typing import TYPE_CHECKING, Any

from ..engine_core.action import ActionKind, ActionType
from ..engine_core.reducer import ACTION_CONTEXT, SUIT_MATCH_BONUS

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.catalog import Catalog
    from ..engine_core.state import GameState


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for logs/debugging)
    - Confidence in the decision
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0

    # Evaluation details (for debugging)
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    @abstractmethod
    def select_action(
        self,
        state: GameState,
        catalog: Catalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        """
        Select an action from the legal actions.

        Args:
            state: Current game state
            catalog: Class and shop definitions
            legal_actions: List of legal actions to choose from

        Returns:
            BotDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Fuzzing the reducer
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(
        self,
        state: GameState,
        catalog: Catalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(legal_actions),
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Plays a single card on rest every turn, then ends the turn.
    Used for deterministic testing.
    """

    def select_action(
        self,
        state: GameState,
        catalog: Catalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        return BotDecision(
            action=legal_actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


@dataclass
class GreedyWeights:
    """Weights for GreedyPolicy's play estimate."""
    explore_bonus: float = 3.0
    extra_card_penalty: float = 1.5  # per card beyond the first
    low_health: int = 4


class GreedyPolicy(BotPolicy):
    """
    Greedy policy - spends XP and gold when it can, otherwise makes the
    play with the highest estimated total before the dungeon card is seen.

    Rewinds failed turns whenever the engine offers it.
    """

    def __init__(self, weights: GreedyWeights | None = None):
        self.weights = weights or GreedyWeights()

    def select_action(
        self,
        state: GameState,
        catalog: Catalog,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        by_type: dict[ActionType, list[Action]] = {}
        for action in legal_actions:
            by_type.setdefault(action.action_type, []).append(action)

        if ActionType.REWIND_FATE in by_type:
            return BotDecision(action=by_type[ActionType.REWIND_FATE][0], explanation="Rewinding a failure")
        if ActionType.END_TURN in by_type:
            return BotDecision(action=by_type[ActionType.END_TURN][0], explanation="Confirming result")

        player = state.player
        if player.resources.health <= self.weights.low_health:
            for action in by_type.get(ActionType.BUY_ITEM, []):
                item = catalog.get_item(action.payload.item_name)
                if item is not None and item.heal:
                    return BotDecision(action=action, explanation="Buying a potion")
            if ActionType.PURIFY in by_type:
                return BotDecision(action=by_type[ActionType.PURIFY][0], explanation="Healing")

        for action_type in (ActionType.LEVEL_UP, ActionType.UPGRADE_STAT):
            if action_type in by_type:
                return BotDecision(action=by_type[action_type][0], explanation="Spending XP")

        best, best_score = None, float("-inf")
        plays = by_type.get(ActionType.PLAY_CARDS, [])
        for action in plays:
            score = self._estimate(state, action)
            if score > best_score:
                best, best_score = action, score
        if best is None:
            best = legal_actions[0]
        return BotDecision(
            action=best,
            explanation="Best estimated play",
            evaluated_actions=len(plays),
            best_score=best_score,
        )

    def _estimate(self, state: GameState, action: Action) -> float:
        """Raw card total plus stat and suit bonuses, less a per-card charge."""
        payload = action.payload
        cards = state.find_in_hand(payload.card_ids) or ()
        if payload.action_kind is ActionKind.EXPLORE:
            location = state.get_location(payload.location_id)
            stat, suit = location.stat_attribute, location.preferred_suit
            bonus = self.weights.explore_bonus
        else:
            stat, suit = ACTION_CONTEXT[payload.action_kind]
            bonus = 0.0
        total = sum(c.value for c in cards)
        total += state.player.stat_bonus(stat)
        total += SUIT_MATCH_BONUS * sum(1 for c in cards if c.suit is suit)
        return total + bonus - self.weights.extra_card_penalty * (len(cards) - 1)
