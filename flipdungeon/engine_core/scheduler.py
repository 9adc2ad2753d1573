"""
Round/Turn Scheduler - End-of-turn bookkeeping and the game clock.

end_turn() confirms the pending TurnResult:
1. Commit its record to history
2. Move played cards and the dungeon card to their discard piles
3. Draw the hand back up to hand_size
4. Evil decay (-1 health at or below the evil threshold)
5. Ability cooldown -1
6. Advance the clock (turn, then round, then game over). A new round
   re-rolls the modifiers ahead of each location cursor
"""

from __future__ import annotations
import logging

from .cards import rank_value
from .ledger import clear_round_effects, evil_decay, tick_cooldown
from .modifiers import reroll_modifiers
from .state import GamePhase, GameState

logger = logging.getLogger(__name__)


def advance_clock(state: GameState) -> GameState:
    """
    Move to the next turn.

    Past turns_per_round a new round starts, round effects are cleared and
    every encounter not yet reached re-rolls its modifier at a scalar of
    twice the round just finished.
    Past max_rounds the game is over; the counters stay on the last turn.
    """
    settings = state.settings
    if state.turn < settings.turns_per_round:
        return state._copy_with(turn=state.turn + 1)

    if state.round >= settings.max_rounds:
        logger.info("game %s: final round complete", state.game_id)
        return state._copy_with(phase=GamePhase.GAME_OVER)

    logger.debug("game %s: round %d begins", state.game_id, state.round + 1)
    rng = state.rng()
    scalar = state.round * 2
    locations = tuple(reroll_modifiers(loc, scalar, rng) for loc in state.locations)
    return state._copy_with(
        round=state.round + 1,
        turn=1,
        player=clear_round_effects(state.player),
        locations=locations,
    ).with_rng(rng)


def end_turn(state: GameState) -> GameState:
    """Confirm the pending result. The caller checks that one exists."""
    result = state.turn_result
    settings = state.settings
    rng = state.rng()

    history = state.history + (result.pending_record,)

    # The dungeon card carries its effective value; put the face value back
    dungeon_card = result.dungeon_card.with_value(rank_value(result.dungeon_card.rank))
    player_pile = state.player_pile.add_to_discard(result.player_cards)
    dungeon_pile = state.dungeon_pile.add_to_discard((dungeon_card,))

    needed = max(0, settings.hand_size - len(state.hand))
    drawn, player_pile = player_pile.draw(needed, rng)

    player = evil_decay(state.player, settings)
    player = tick_cooldown(player)

    state = state._copy_with(
        history=history,
        turn_result=None,
        phase=GamePhase.PLAYING,
        player=player,
        player_pile=player_pile,
        dungeon_pile=dungeon_pile,
        hand=state.hand + drawn,
    ).with_rng(rng)

    if not player.is_alive:
        logger.info("game %s: player fell on round %d turn %d", state.game_id, state.round, state.turn)
        return state._copy_with(phase=GamePhase.GAME_OVER)

    return advance_clock(state)
