"""
Bot Runner - Plays whole games with a policy.

Each step asks the action generator for the legal actions, lets the policy
pick one and feeds it to the reducer. A rejected action means the generator
and reducer disagree, which is a bug, so it raises.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core.action import Action
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.catalog import Catalog
from ..engine_core.reducer import Reducer
from ..engine_core.scoring import calculate_score, outcome
from ..engine_core.state import GameState
from .policy import BotPolicy

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 2000
DEFAULT_MAX_PLAY_SIZE = 3


@dataclass
class GameRecord:
    """A finished (or abandoned) bot game."""
    final_state: GameState
    steps: int
    actions: list[Action] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.final_state.is_over

    @property
    def score(self) -> int:
        return calculate_score(self.final_state.player, self.final_state.difficulty)

    @property
    def outcome(self) -> str:
        return outcome(self.final_state.player)


def play_game(
    policy: BotPolicy,
    state: GameState,
    catalog: Catalog,
    max_steps: int = DEFAULT_MAX_STEPS,
    max_play_size: int | None = DEFAULT_MAX_PLAY_SIZE,
) -> GameRecord:
    """
    Play until the game is over or max_steps actions have been applied.

    Raises:
        RuntimeError: if the reducer rejects a generated action
    """
    generator = ActionGenerator(catalog=catalog, max_play_size=max_play_size)
    reducer = Reducer(catalog=catalog)
    actions = []

    steps = 0
    while not state.is_over and steps < max_steps:
        options = generator.generate(state)
        if not options:
            break
        decision = policy.select_action(state, catalog, options)
        result = reducer.apply(state, decision.action)
        if not result.success:
            raise RuntimeError(
                f"{policy.get_name()} chose a rejected action {decision.action.key}: {result.error}"
            )
        state = result.new_state
        actions.append(decision.action)
        steps += 1

    if not state.is_over:
        logger.warning("%s stopped after %d steps without finishing", policy.get_name(), steps)
    else:
        logger.debug("%s finished %s in %d steps", policy.get_name(), state.game_id, steps)
    return GameRecord(final_state=state, steps=steps, actions=actions)
