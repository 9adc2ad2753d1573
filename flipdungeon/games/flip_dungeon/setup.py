"""
Flip Dungeon Game Setup - Creates initial game state.

This module handles:
- Building the player from the class catalog
- Shuffling both decks with a seed for determinism
- Rolling the location map and drawing quests
- Dealing the opening hand
"""

from __future__ import annotations
import random

from ...engine_core.cards import DeckPile
from ...engine_core.catalog import Catalog
from ...engine_core.settings import DEFAULT_SETTINGS, Difficulty, GameSettings
from ...engine_core.state import (
    CharacterClass,
    GamePhase,
    GameState,
    PlayerState,
    Resources,
)
from .content import DEFAULT_CATALOG
from .locations import default_locations, generate_random_location
from .quests import generate_quests


def new_game(
    character_class: CharacterClass | str = CharacterClass.DRUID,
    difficulty: Difficulty | str = Difficulty.NORMAL,
    settings: GameSettings = DEFAULT_SETTINGS,
    random_seed: int | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
    extra_locations: int = 0,
    quest_count: int = 4,
) -> GameState:
    """
    Set up a new game.

    Args:
        character_class: Class to play (enum or name, case-insensitive)
        difficulty: Easy, Normal or Hard
        settings: Rule constants
        random_seed: Seed for deterministic shuffling and map rolls
        catalog: Class and shop definitions
        extra_locations: Random locations added after the default four
        quest_count: Quests drawn for this game

    Returns:
        Initial GameState ready for play
    """
    character_class = CharacterClass.parse(character_class)
    difficulty = Difficulty.parse(difficulty)
    if random_seed is None:
        random_seed = random.SystemRandom().randrange(2 ** 32)
    rng = random.Random(random_seed)

    definition = catalog.class_definition(character_class)
    player = PlayerState(
        character_class=character_class,
        stats=definition.stats,
        resources=Resources(health=settings.initial_health, max_health=settings.initial_health),
        quests=generate_quests(rng, quest_count),
    )

    locations = default_locations(rng)
    locations += tuple(generate_random_location(1, rng, index=i) for i in range(extra_locations))

    player_pile = DeckPile.fresh("player", rng)
    dungeon_pile = DeckPile.fresh("dungeon", rng)
    hand, player_pile = player_pile.draw(settings.hand_size, rng)

    state = GameState(
        game_id=f"flipdungeon_{random_seed}",
        player=player,
        phase=GamePhase.PLAYING,
        difficulty=difficulty,
        settings=settings,
        locations=locations,
        player_pile=player_pile,
        dungeon_pile=dungeon_pile,
        hand=hand,
        metadata={"random_seed": random_seed},
    )
    return state.with_rng(rng)
