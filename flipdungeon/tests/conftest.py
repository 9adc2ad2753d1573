"""
Pytest fixtures for Flip Dungeon tests.

Most tests build a controlled GameState: a known hand, and a dungeon pile
whose top cards are chosen by the test so resolutions are predictable.
"""

import random

import pytest

from ..engine_core.cards import Card, DeckPile, Rank, Suit, rank_value
from ..engine_core.catalog import Catalog
from ..engine_core.settings import DEFAULT_SETTINGS, Difficulty
from ..engine_core.state import (
    AdventureLocation,
    CharacterClass,
    CompletionReward,
    Encounter,
    GamePhase,
    GameState,
    PlayerState,
    Resources,
    RewardKind,
    StatAttribute,
)
from ..games.flip_dungeon import DEFAULT_CATALOG


def make_card(rank: str, suit: Suit, tag: str = "") -> Card:
    """A card with a readable id, e.g. 8-spades."""
    r = Rank(rank)
    return Card(suit=suit, rank=r, value=rank_value(r), card_id=f"{rank}-{suit.value}{tag}")


def make_location(
    location_id: str = "crypt",
    length: int = 3,
    stat: StatAttribute = StatAttribute.MIGHT,
    suit: Suit = Suit.SPADES,
    reward: CompletionReward | None = None,
    encounters=None,
) -> AdventureLocation:
    """A location of plain encounters (no modifiers) unless encounters are given."""
    if encounters is None:
        encounters = [Encounter(encounter_id=f"{location_id}-{i}", name=f"Room {i}") for i in range(length)]
    return AdventureLocation.create(
        location_id=location_id,
        name=location_id.title(),
        stat_attribute=stat,
        preferred_suit=suit,
        completion_reward=reward or CompletionReward(kind=RewardKind.GOLD, amount=5),
        encounters=encounters,
    )


def make_state(
    hand=(),
    dungeon=(),
    character_class: CharacterClass = CharacterClass.DRUID,
    health: int = 10,
    max_health: int = 10,
    mana: int = 0,
    gold: int = 0,
    xp: int = 0,
    locations=(),
    phase: GamePhase = GamePhase.PLAYING,
    difficulty: Difficulty = Difficulty.NORMAL,
    settings=DEFAULT_SETTINGS,
    catalog: Catalog = DEFAULT_CATALOG,
    seed: int = 7,
    **player_fields,
) -> GameState:
    """
    A playing state with the given hand.

    `dungeon` cards are drawn first, in order; a fresh shuffled deck
    follows them so draws never run dry.
    """
    rng = random.Random(seed)
    definition = catalog.class_definition(character_class)
    player_fields.setdefault("stats", definition.stats)
    player = PlayerState(
        character_class=character_class,
        resources=Resources(health=health, max_health=max_health, mana=mana, gold=gold, xp=xp),
        **player_fields,
    )
    player_pile = DeckPile.fresh("player", rng)
    fresh_dungeon = DeckPile.fresh("dungeon", rng)
    dungeon_pile = DeckPile(name="dungeon", cards=tuple(dungeon) + fresh_dungeon.cards)
    state = GameState(
        game_id="test_game",
        player=player,
        phase=phase,
        difficulty=difficulty,
        settings=settings,
        locations=tuple(locations),
        player_pile=player_pile,
        dungeon_pile=dungeon_pile,
        hand=tuple(hand),
    )
    return state.with_rng(rng)


@pytest.fixture
def catalog() -> Catalog:
    return DEFAULT_CATALOG


@pytest.fixture
def card():
    """Factory fixture: card("8", Suit.SPADES)."""
    return make_card


@pytest.fixture
def location():
    """Factory fixture for plain locations."""
    return make_location


@pytest.fixture
def game_state():
    """Factory fixture for controlled game states."""
    return make_state


@pytest.fixture
def starting_hand() -> tuple[Card, ...]:
    """Five unrelated cards: no combo among any of them."""
    return (
        make_card("8", Suit.SPADES),
        make_card("2", Suit.HEARTS),
        make_card("5", Suit.CLUBS),
        make_card("K", Suit.DIAMONDS),
        make_card("10", Suit.HEARTS),
    )


@pytest.fixture
def playing_state(starting_hand) -> GameState:
    """A Druid holding starting_hand, dungeon showing 9 then 3."""
    return make_state(
        hand=starting_hand,
        dungeon=(make_card("9", Suit.CLUBS, "-d"), make_card("3", Suit.DIAMONDS, "-d")),
        locations=(make_location(),),
    )
