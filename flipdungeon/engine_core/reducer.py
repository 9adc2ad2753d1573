"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state, randomness included
  (the rng travels in GameState.rng_state)
- Validates before applying; a rule violation is a rejected
  ActionResult carrying the unchanged state, never an exception
- Numeric resolution is delegated to the resolver, resource changes to
  the ledger, cursor movement to progression, the clock to the scheduler
- Quests are re-checked after every accepted action
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .action import Action, ActionKind, ActionResult, ActionType, ErrorCode
from .cards import Suit, rank_value
from .catalog import Catalog
from .ledger import (
    activate_ability,
    apply_damage,
    apply_resolution,
    buy_item,
    buy_time_warp,
    can_activate,
    check_quests,
    consume_effects,
    dark_pact,
    grant_completion_reward,
    level_up,
    level_up_cost,
    pay_mulligan,
    pay_rewind,
    purify,
    refund_damage,
    spend_mana,
    stat_upgrade_cost,
    time_warp_cost,
    upgrade_stat,
    MULLIGAN_COST,
    PURIFY_COST,
    REWIND_COST,
)
from .progression import advance_location
from .resolver import ResolutionInput, build_turn_result, resolve_turn, rewind_fate
from .scheduler import end_turn
from .state import (
    GamePhase,
    GameState,
    ModifierKind,
    StatAttribute,
    TRAINABLE_STATS,
)

logger = logging.getLogger(__name__)


SUIT_MATCH_BONUS = 2  # per matching card

# Self actions: the stat that backs them and the suit they favour
ACTION_CONTEXT = {
    ActionKind.REST: (StatAttribute.SPIRIT, Suit.HEARTS),
    ActionKind.TRAIN: (StatAttribute.MIGHT, Suit.CLUBS),
    ActionKind.LOOT: (StatAttribute.AGILITY, Suit.SPADES),
    ActionKind.STUDY: (StatAttribute.WISDOM, Suit.DIAMONDS),
}

RESOLVING_ACTIONS = frozenset({ActionType.REWIND_FATE, ActionType.END_TURN})


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    The catalog provides class abilities and shop items.
    """
    catalog: Catalog

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or a rejection.
        """
        phase_error = self._validate_phase(state, action)
        if phase_error:
            return phase_error

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.rejected(
                state, f"No handler for action type: {action.action_type}", ErrorCode.INVALID_ACTION,
            )

        result = handler(state, action)
        if result.success:
            result.new_state = self._after_accepted(result.new_state, result.state_changes)
            logger.debug("game %s: applied %s", state.game_id, action.key)
        else:
            logger.debug("game %s: rejected %s (%s)", state.game_id, action.key, result.error_code.value)
        return result

    def _validate_phase(self, state: GameState, action: Action) -> ActionResult | None:
        """
        Phase gate.

        While resolving, only rewind and end turn are legal. While playing,
        those two have nothing to act on.
        """
        if state.phase is GamePhase.GAME_OVER:
            return ActionResult.rejected(state, "Game is over - no actions allowed", ErrorCode.INVALID_PHASE)
        if state.phase is GamePhase.SETUP:
            return ActionResult.rejected(state, "Game not started", ErrorCode.INVALID_PHASE)

        if state.phase is GamePhase.RESOLVING and action.action_type not in RESOLVING_ACTIONS:
            return ActionResult.rejected(
                state, "Confirm the current result before acting again", ErrorCode.INVALID_PHASE,
            )
        if state.phase is GamePhase.PLAYING and action.action_type in RESOLVING_ACTIONS:
            return ActionResult.rejected(state, "No result is pending", ErrorCode.NOTHING_PENDING)
        return None

    def _after_accepted(self, state: GameState, changes: list[str]) -> GameState:
        """Quest check and death check, run after every accepted action."""
        before = state.player
        player = check_quests(before)
        if player is not before:
            for old, new in zip(before.quests, player.quests):
                if new.is_completed and not old.is_completed:
                    changes.append(f"Quest complete: {new.name} (+{new.bonus_points})")
            state = state.with_player(player)

        if not player.is_alive and state.phase is not GamePhase.GAME_OVER:
            # The fatal result never gets confirmed; commit it now
            if state.turn_result is not None:
                state = state._copy_with(history=state.history + (state.turn_result.pending_record,))
            logger.info("game %s: player defeated", state.game_id)
            changes.append("You have fallen.")
            state = state._copy_with(phase=GamePhase.GAME_OVER)
        return state

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY_CARDS: self._handle_play_cards,
            ActionType.REWIND_FATE: self._handle_rewind_fate,
            ActionType.END_TURN: self._handle_end_turn,
            ActionType.DARK_PACT: self._handle_dark_pact,
            ActionType.PURIFY: self._handle_purify,
            ActionType.UPGRADE_STAT: self._handle_upgrade_stat,
            ActionType.LEVEL_UP: self._handle_level_up,
            ActionType.BUY_ITEM: self._handle_buy_item,
            ActionType.MULLIGAN: self._handle_mulligan,
            ActionType.ACTIVATE_ABILITY: self._handle_activate_ability,
            ActionType.TIME_WARP: self._handle_time_warp,
        }
        return handlers.get(action_type)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _handle_play_cards(self, state: GameState, action: Action) -> ActionResult:
        """Spend cards on a self action or a location and resolve it."""
        payload = action.payload
        kind = payload.action_kind
        settings = state.settings

        if kind is None:
            return ActionResult.rejected(state, "No action chosen for the cards", ErrorCode.INVALID_ACTION)
        if not payload.card_ids:
            return ActionResult.rejected(state, "Select at least one card", ErrorCode.NO_CARDS)
        if len(set(payload.card_ids)) != len(payload.card_ids):
            return ActionResult.rejected(state, "A card was selected twice", ErrorCode.UNKNOWN_CARD)
        cards = state.find_in_hand(payload.card_ids)
        if cards is None:
            return ActionResult.rejected(state, "Card not in hand", ErrorCode.UNKNOWN_CARD)

        location = None
        modifier = None
        if kind is ActionKind.EXPLORE:
            location = state.get_location(payload.location_id)
            if location is None:
                return ActionResult.rejected(
                    state, f"Unknown location: {payload.location_id}", ErrorCode.UNKNOWN_LOCATION,
                )
            if location.is_cleared:
                return ActionResult.rejected(
                    state, f"{location.name} is already cleared", ErrorCode.LOCATION_CLEARED,
                )
            modifier = location.active_modifier
            if modifier is not None and modifier.kind is ModifierKind.MAX_CARDS and len(cards) > modifier.value:
                return ActionResult.rejected(
                    state, f"{modifier.name}: play at most {modifier.value} card(s)", ErrorCode.TOO_MANY_CARDS,
                )
            stat, suit = location.stat_attribute, location.preferred_suit
        else:
            stat, suit = ACTION_CONTEXT[kind]

        cost = settings.play_cost(len(cards))
        player = state.player
        if player.resources.mana < cost:
            return ActionResult.rejected(
                state, f"Playing {len(cards)} cards costs {cost} mana", ErrorCode.INSUFFICIENT_MANA,
            )
        player = spend_mana(player, cost)

        rng = state.rng()
        drawn, dungeon_pile = state.dungeon_pile.draw(1, rng)

        inputs = ResolutionInput(
            cards=cards,
            dungeon_card=drawn[0],
            kind=kind,
            stat_bonus=player.stat_bonus(stat),
            suit_bonus=SUIT_MATCH_BONUS * sum(1 for c in cards if c.suit is suit),
            location_id=location.location_id if location else None,
            location_name=location.name if location else None,
            modifier=modifier,
            auto_crit=player.effects.auto_crit,
            damage_block=player.effects.damage_block,
        )
        resolution = resolve_turn(inputs, state.difficulty, player.alignment, settings)
        player = consume_effects(player, auto_crit=inputs.auto_crit, damage_block=resolution.damage_blocked)

        changes = []
        if cost:
            changes.append(f"Spent {cost} mana")
        if resolution.success:
            player = apply_resolution(player, resolution.rewards)
        else:
            player = apply_damage(player, resolution.damage)
        changes.append(resolution.message)

        played = {c.card_id for c in cards}
        new_state = state._copy_with(
            player=player,
            dungeon_pile=dungeon_pile,
            hand=tuple(c for c in state.hand if c.card_id not in played),
            phase=GamePhase.RESOLVING,
            turn_result=build_turn_result(inputs, resolution, state.round, state.turn),
        ).with_rng(rng)

        if location is not None and resolution.success:
            outcome = advance_location(location, resolution.rewards.location_steps, cards[0])
            new_state = new_state.with_location(outcome.location)
            if outcome.branch_taken is not None:
                changes.append(f"Took the {outcome.branch_taken.value} path")
            if outcome.cleared:
                reward = location.completion_reward
                new_state = new_state.with_player(
                    grant_completion_reward(new_state.player, reward, settings),
                )
                changes.append(f"{location.name} cleared! {reward.describe()}")

        return ActionResult.success_with_state(new_state, changes)

    def _handle_rewind_fate(self, state: GameState, action: Action) -> ActionResult:
        """Pay to redraw the dungeon card for a failed, unconfirmed result."""
        result = state.turn_result
        if result is None:
            return ActionResult.rejected(state, "No result is pending", ErrorCode.NOTHING_PENDING)
        if result.rewound:
            return ActionResult.rejected(state, "Fate can only be rewound once", ErrorCode.ALREADY_REWOUND)
        if result.success:
            return ActionResult.rejected(state, "Only a failure can be rewound", ErrorCode.INVALID_ACTION)
        if result.damage_blocked:
            return ActionResult.rejected(state, "A blocked failure cannot be rewound", ErrorCode.INVALID_ACTION)

        paid = pay_rewind(state.player)
        if paid is state.player:
            return ActionResult.rejected(state, f"Rewinding costs {REWIND_COST} mana", ErrorCode.INSUFFICIENT_MANA)

        rng = state.rng()
        old_card = result.dungeon_card.with_value(rank_value(result.dungeon_card.rank))
        drawn, dungeon_pile = state.dungeon_pile.add_to_discard((old_card,)).draw(1, rng)

        new_result = rewind_fate(result, drawn[0], state.difficulty)
        player = apply_damage(refund_damage(paid, result.damage), new_result.damage)

        new_state = state._copy_with(
            player=player,
            dungeon_pile=dungeon_pile,
            turn_result=new_result,
        ).with_rng(rng)
        return ActionResult.success_with_state(new_state, [f"Spent {REWIND_COST} mana", new_result.message])

    def _handle_end_turn(self, state: GameState, action: Action) -> ActionResult:
        if state.turn_result is None:
            return ActionResult.rejected(state, "No result is pending", ErrorCode.NOTHING_PENDING)
        new_state = end_turn(state)
        if new_state.is_over:
            changes = ["The adventure is over."]
        elif new_state.round != state.round:
            changes = [f"Round {new_state.round} begins"]
        else:
            changes = [f"Turn {new_state.turn}"]
        return ActionResult.success_with_state(new_state, changes)

    # =========================================================================
    # Ledger events
    # =========================================================================

    def _handle_dark_pact(self, state: GameState, action: Action) -> ActionResult:
        player = dark_pact(state.player, state.settings)
        return ActionResult.success_with_state(state.with_player(player), ["Dark Pact: +5 mana"])

    def _handle_purify(self, state: GameState, action: Action) -> ActionResult:
        player = purify(state.player, state.settings)
        if player is state.player:
            return ActionResult.rejected(state, f"Purify costs {PURIFY_COST} mana", ErrorCode.INSUFFICIENT_MANA)
        return ActionResult.success_with_state(state.with_player(player), ["Purified: healed 3"])

    def _handle_upgrade_stat(self, state: GameState, action: Action) -> ActionResult:
        stat = action.payload.stat
        if stat not in TRAINABLE_STATS:
            return ActionResult.rejected(state, f"Cannot upgrade {stat}", ErrorCode.INVALID_STAT)
        cost = stat_upgrade_cost(state.player, stat, state.settings)
        player = upgrade_stat(state.player, stat, state.settings)
        if player is state.player:
            return ActionResult.rejected(state, f"Upgrading {stat.value} costs {cost} XP", ErrorCode.INSUFFICIENT_XP)
        return ActionResult.success_with_state(
            state.with_player(player), [f"{stat.value.title()} is now {player.stats.get(stat)}"],
        )

    def _handle_level_up(self, state: GameState, action: Action) -> ActionResult:
        cost = level_up_cost(state.player, state.settings)
        player = level_up(state.player, state.settings)
        if player is state.player:
            return ActionResult.rejected(state, f"Leveling up costs {cost} XP", ErrorCode.INSUFFICIENT_XP)
        return ActionResult.success_with_state(state.with_player(player), [f"Reached level {player.stats.level}"])

    def _handle_buy_item(self, state: GameState, action: Action) -> ActionResult:
        name = action.payload.item_name or ""
        item = self.catalog.get_item(name)
        if item is None:
            return ActionResult.rejected(state, f"Unknown item: {name}", ErrorCode.UNKNOWN_ITEM)
        player = buy_item(state.player, item)
        if player is state.player:
            return ActionResult.rejected(state, f"{item.name} costs {item.cost} gold", ErrorCode.INSUFFICIENT_GOLD)
        return ActionResult.success_with_state(state.with_player(player), [f"Bought {item.name}"])

    def _handle_mulligan(self, state: GameState, action: Action) -> ActionResult:
        """Swap exactly one hand card for the top of the player deck."""
        card_ids = action.payload.card_ids
        if len(card_ids) != 1:
            return ActionResult.rejected(state, "Mulligan exactly one card", ErrorCode.INVALID_ACTION)
        found = state.find_in_hand(card_ids)
        if found is None:
            return ActionResult.rejected(state, "Card not in hand", ErrorCode.UNKNOWN_CARD)
        player = pay_mulligan(state.player)
        if player is state.player:
            return ActionResult.rejected(state, f"Mulligan costs {MULLIGAN_COST} mana", ErrorCode.INSUFFICIENT_MANA)

        old_card = found[0]
        rng = state.rng()
        drawn, player_pile = state.player_pile.draw(1, rng)
        new_card = drawn[0]
        hand = tuple(new_card if c.card_id == old_card.card_id else c for c in state.hand)

        new_state = state._copy_with(
            player=player,
            hand=hand,
            player_pile=player_pile.add_to_discard((old_card,)),
        ).with_rng(rng)
        return ActionResult.success_with_state(new_state, [f"Swapped {old_card.label} for {new_card.label}"])

    def _handle_activate_ability(self, state: GameState, action: Action) -> ActionResult:
        player = state.player
        ability = self.catalog.ability_for(player.character_class)
        if ability is None:
            return ActionResult.rejected(
                state, f"{player.character_class.value} has no ability", ErrorCode.INVALID_ACTION,
            )
        if player.ability_cooldown > 0:
            return ActionResult.rejected(
                state, f"{ability.name} is ready in {player.ability_cooldown} turn(s)", ErrorCode.ON_COOLDOWN,
            )
        if player.resources.mana < ability.mana_cost:
            return ActionResult.rejected(
                state, f"{ability.name} costs {ability.mana_cost} mana", ErrorCode.INSUFFICIENT_MANA,
            )
        if not can_activate(player, ability):
            return ActionResult.rejected(
                state, f"{ability.name} costs {ability.health_cost} health", ErrorCode.INSUFFICIENT_HEALTH,
            )
        player = activate_ability(player, ability, state.settings)
        return ActionResult.success_with_state(state.with_player(player), [f"{ability.name}: {ability.description}"])

    def _handle_time_warp(self, state: GameState, action: Action) -> ActionResult:
        """Buy back a turn. Cost escalates with each purchase."""
        if state.turn <= 1:
            return ActionResult.rejected(state, "No turn to take back yet", ErrorCode.NO_TURN_TO_WARP)
        cost = time_warp_cost(state.player)
        player = buy_time_warp(state.player)
        if player is state.player:
            return ActionResult.rejected(state, f"Time Warp costs {cost} mana", ErrorCode.INSUFFICIENT_MANA)
        new_state = state._copy_with(player=player, turn=state.turn - 1)
        return ActionResult.success_with_state(new_state, [f"Time Warp: back to turn {new_state.turn}"])


def apply_action(catalog: Catalog, state: GameState, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog)
    return reducer.apply(state, action)
