"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. Bots to enumerate possible moves
2. The API to show available actions
3. Affordability checks before an action is offered

Design: Generates Action objects, not just action types.
Every generated action is accepted by the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations

from .action import Action, ActionKind
from .catalog import Catalog
from .ledger import (
    can_activate,
    level_up_cost,
    stat_upgrade_cost,
    time_warp_cost,
    MULLIGAN_COST,
    PURIFY_COST,
    REWIND_COST,
)
from .state import GamePhase, GameState, ModifierKind, TRAINABLE_STATS


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the current game state.

    `max_play_size` limits how many cards a generated play may use; card
    subsets grow quickly, and bots rarely need all of them.
    """
    catalog: Catalog
    max_play_size: int | None = None

    def generate(self, state: GameState) -> list[Action]:
        """Generate all legal actions. Empty once the game is over."""
        if state.phase in (GamePhase.GAME_OVER, GamePhase.SETUP):
            return []

        if state.phase is GamePhase.RESOLVING:
            return self._generate_resolving_actions(state)

        actions = []
        actions.extend(self._generate_play_actions(state))
        actions.extend(self._generate_ledger_actions(state))
        return actions

    def _generate_resolving_actions(self, state: GameState) -> list[Action]:
        actions = [Action.end_turn()]
        result = state.turn_result
        if (
            result is not None
            and not result.success
            and not result.rewound
            and not result.damage_blocked
            and state.player.resources.mana >= REWIND_COST
        ):
            actions.append(Action.rewind_fate())
        return actions

    def _card_subsets(self, state: GameState, limit: int) -> list[tuple[str, ...]]:
        """Card id subsets of size 1..limit that the player can pay for."""
        settings = state.settings
        mana = state.player.resources.mana
        ids = [c.card_id for c in state.hand]
        subsets = []
        for size in range(1, min(limit, len(ids)) + 1):
            if settings.play_cost(size) > mana:
                break
            subsets.extend(combinations(ids, size))
        return subsets

    def _generate_play_actions(self, state: GameState) -> list[Action]:
        """One play per affordable card subset and target."""
        limit = self.max_play_size or len(state.hand)
        subsets = self._card_subsets(state, limit)

        actions = []
        for kind in (ActionKind.REST, ActionKind.TRAIN, ActionKind.LOOT, ActionKind.STUDY):
            for card_ids in subsets:
                actions.append(Action.play(kind, card_ids))

        for location in state.locations:
            if location.is_cleared:
                continue
            modifier = location.active_modifier
            cap = limit
            if modifier is not None and modifier.kind is ModifierKind.MAX_CARDS:
                cap = min(cap, modifier.value)
            for card_ids in subsets:
                if len(card_ids) <= cap:
                    actions.append(Action.explore(location.location_id, card_ids))
        return actions

    def _generate_ledger_actions(self, state: GameState) -> list[Action]:
        """Ledger events whose preconditions hold."""
        player = state.player
        settings = state.settings
        resources = player.resources

        actions = [Action.dark_pact()]
        if resources.mana >= PURIFY_COST:
            actions.append(Action.purify())

        for stat in TRAINABLE_STATS:
            if resources.xp >= stat_upgrade_cost(player, stat, settings):
                actions.append(Action.upgrade_stat(stat))
        if resources.xp >= level_up_cost(player, settings):
            actions.append(Action.level_up())

        for item in self.catalog.shop:
            if resources.gold >= item.cost:
                actions.append(Action.buy_item(item.name))

        if resources.mana >= MULLIGAN_COST:
            for card in state.hand:
                actions.append(Action.mulligan(card.card_id))

        ability = self.catalog.ability_for(player.character_class)
        if ability is not None and can_activate(player, ability):
            actions.append(Action.activate_ability())

        if state.turn > 1 and resources.mana >= time_warp_cost(player):
            actions.append(Action.time_warp())
        return actions


def legal_actions(catalog: Catalog, state: GameState, max_play_size: int | None = None) -> list[Action]:
    """Convenience wrapper around ActionGenerator."""
    return ActionGenerator(catalog=catalog, max_play_size=max_play_size).generate(state)
