"""
Game State - Immutable containers for everything the engine owns.

Design principles:
- Immutable: frozen dataclasses, all mutations return new objects
- Serializable: the rng travels as state so a game can be replayed
- The reducer is the only place new GameStates are produced
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
import random

from .cards import Card, DeckPile, Suit
from .combos import HandCombo
from .settings import Difficulty, GameSettings, DEFAULT_SETTINGS


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    RESOLVING = "resolving"  # A TurnResult is pending confirmation
    GAME_OVER = "game_over"


class StatAttribute(Enum):
    """Player stats. LEVEL is bought separately and never buffed."""
    LEVEL = "level"
    MIGHT = "might"
    AGILITY = "agility"
    WISDOM = "wisdom"
    SPIRIT = "spirit"


TRAINABLE_STATS = (
    StatAttribute.MIGHT,
    StatAttribute.AGILITY,
    StatAttribute.WISDOM,
    StatAttribute.SPIRIT,
)


class CharacterClass(Enum):
    DRUID = "Druid"
    RANGER = "Ranger"
    PALADIN = "Paladin"
    ALCHEMIST = "Alchemist"
    NECROMANCER = "Necromancer"
    BARD = "Bard"

    @classmethod
    def parse(cls, value: str | CharacterClass) -> CharacterClass:
        if isinstance(value, CharacterClass):
            return value
        for member in cls:
            if member.value.lower() == str(value).lower():
                return member
        raise ValueError(f"Unknown character class: {value}")


# =============================================================================
# Locations
# =============================================================================

class ModifierKind(Enum):
    DIFFICULTY = "difficulty"  # flat value added to the dungeon card
    MAX_CARDS = "max_cards"  # cap on cards played
    SUIT_PENALTY = "suit_penalty"  # target suit contributes 0
    ELITE_MECHANIC = "elite_mechanic"  # flat add plus a special rule


class EliteMechanic(Enum):
    DOUBLE_DAMAGE = "double_damage"
    POWER_FLOOR = "power_floor"


@dataclass(frozen=True)
class NodeModifier:
    """A rule attached to one encounter."""
    kind: ModifierKind
    value: int = 0
    name: str = ""
    description: str = ""
    target_suit: Suit | None = None
    elite: EliteMechanic | None = None
    floor: int = 0

    @property
    def adds_difficulty(self) -> bool:
        return self.kind in (ModifierKind.DIFFICULTY, ModifierKind.ELITE_MECHANIC)

    @property
    def doubles_damage(self) -> bool:
        return self.kind is ModifierKind.ELITE_MECHANIC and self.elite is EliteMechanic.DOUBLE_DAMAGE

    def penalizes(self, suit: Suit) -> bool:
        return self.kind is ModifierKind.SUIT_PENALTY and self.target_suit is suit


@dataclass(frozen=True)
class Branch:
    """A fork picked by the colour of the first card played."""
    text: str
    red: tuple[Encounter, ...] = ()
    black: tuple[Encounter, ...] = ()


@dataclass(frozen=True)
class Encounter:
    encounter_id: str
    name: str
    modifier: NodeModifier | None = None
    branch: Branch | None = None
    description: str = ""


class RewardKind(Enum):
    GOLD = "gold"
    XP = "xp"
    MANA = "mana"
    ITEM = "item"
    ARTIFACT = "artifact"
    STAT_POINT = "stat_point"


@dataclass(frozen=True)
class CompletionReward:
    kind: RewardKind
    amount: int = 1
    stat: StatAttribute | None = None
    name: str | None = None

    def describe(self) -> str:
        if self.kind in (RewardKind.ITEM, RewardKind.ARTIFACT):
            return f"{self.kind.value.title()}: {self.name}"
        if self.kind is RewardKind.STAT_POINT:
            return f"+{self.amount} {self.stat.value.title()}"
        return f"+{self.amount} {self.kind.value.title()}"


@dataclass(frozen=True)
class AdventureLocation:
    """
    A location with an ordered path of encounters.

    `encounters` is an append-only arena. `route` lists arena indices in
    path order, and `current_encounter_index` is the cursor into `route`.
    Taking a branch appends to the arena and splices indices into the
    route after the cursor; visited positions never change.
    """
    location_id: str
    name: str
    stat_attribute: StatAttribute
    preferred_suit: Suit
    completion_reward: CompletionReward
    encounters: tuple[Encounter, ...] = ()
    route: tuple[int, ...] = ()
    current_encounter_index: int = 0
    description: str = ""

    @classmethod
    def create(
        cls,
        location_id: str,
        name: str,
        stat_attribute: StatAttribute,
        preferred_suit: Suit,
        completion_reward: CompletionReward,
        encounters,
        description: str = "",
    ) -> AdventureLocation:
        encounters = tuple(encounters)
        return cls(
            location_id=location_id,
            name=name,
            stat_attribute=stat_attribute,
            preferred_suit=preferred_suit,
            completion_reward=completion_reward,
            encounters=encounters,
            route=tuple(range(len(encounters))),
            description=description,
        )

    @property
    def length(self) -> int:
        return len(self.route)

    @property
    def is_cleared(self) -> bool:
        return self.current_encounter_index >= len(self.route)

    @property
    def current_encounter(self) -> Encounter | None:
        if self.is_cleared:
            return None
        return self.encounters[self.route[self.current_encounter_index]]

    @property
    def active_modifier(self) -> NodeModifier | None:
        encounter = self.current_encounter
        return encounter.modifier if encounter else None

    @property
    def path(self) -> tuple[Encounter, ...]:
        return tuple(self.encounters[i] for i in self.route)

    def _copy_with(self, **kwargs) -> AdventureLocation:
        return replace(self, **kwargs)


# =============================================================================
# Player
# =============================================================================

@dataclass(frozen=True)
class PlayerStats:
    level: int = 1
    might: int = 1
    agility: int = 1
    wisdom: int = 1
    spirit: int = 1

    def get(self, stat: StatAttribute) -> int:
        return getattr(self, stat.value)

    def with_stat(self, stat: StatAttribute, value: int) -> PlayerStats:
        return replace(self, **{stat.value: value})

    @property
    def total(self) -> int:
        return self.level + self.might + self.agility + self.wisdom + self.spirit


@dataclass(frozen=True)
class Resources:
    health: int
    max_health: int
    gold: int = 0
    mana: int = 0
    xp: int = 0


@dataclass(frozen=True)
class Scoring:
    explore: int = 0
    champion: int = 0
    fortune: int = 0
    soul: int = 0

    def add(self, other: Scoring) -> Scoring:
        return Scoring(
            explore=self.explore + other.explore,
            champion=self.champion + other.champion,
            fortune=self.fortune + other.fortune,
            soul=self.soul + other.soul,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "explore": self.explore,
            "champion": self.champion,
            "fortune": self.fortune,
            "soul": self.soul,
        }


@dataclass(frozen=True)
class ActiveEffects:
    """
    Temporary effects.

    Stat buffs last until the round ends. `auto_crit` is consumed by the
    next resolution; `damage_block` by the next failure it absorbs. Both
    flags also expire at the round boundary.
    """
    might: int = 0
    agility: int = 0
    wisdom: int = 0
    spirit: int = 0
    auto_crit: bool = False
    damage_block: bool = False

    def buff_for(self, stat: StatAttribute) -> int:
        if stat is StatAttribute.LEVEL:
            return 0
        return getattr(self, stat.value)

    def with_buff(self, stat: StatAttribute, amount: int) -> ActiveEffects:
        return replace(self, **{stat.value: self.buff_for(stat) + amount})


class CriterionType(Enum):
    RESOURCE = "resource"
    STAT = "stat"
    SCORING = "scoring"
    ITEM_COUNT = "item_count"
    LOCATION_CLEARED = "location_cleared"
    ALIGNMENT = "alignment"


@dataclass(frozen=True)
class QuestCriterion:
    type: CriterionType
    target: int
    subject: str | None = None
    description: str = ""


@dataclass(frozen=True)
class Quest:
    quest_id: str
    name: str
    criteria: tuple[QuestCriterion, ...]
    bonus_points: int
    description: str = ""
    is_completed: bool = False


@dataclass(frozen=True)
class PlayerState:
    character_class: CharacterClass
    stats: PlayerStats
    resources: Resources
    scoring: Scoring = field(default_factory=Scoring)
    items: tuple[str, ...] = ()
    artifacts: tuple[str, ...] = ()
    effects: ActiveEffects = field(default_factory=ActiveEffects)
    alignment: int = 0
    quests: tuple[Quest, ...] = ()
    locations_cleared: int = 0
    damage_taken: int = 0
    extra_turns_bought: int = 0
    ability_cooldown: int = 0

    @property
    def is_alive(self) -> bool:
        return self.resources.health > 0

    def stat_bonus(self, stat: StatAttribute) -> int:
        """Base stat plus its round buff."""
        return self.stats.get(stat) + self.effects.buff_for(stat)

    def _copy_with(self, **kwargs) -> PlayerState:
        return replace(self, **kwargs)

    def with_resources(self, **kwargs) -> PlayerState:
        return replace(self, resources=replace(self.resources, **kwargs))


# =============================================================================
# Turn history
# =============================================================================

@dataclass(frozen=True)
class TurnRecord:
    """One committed action; the unit of replayable history."""
    round: int
    turn: int
    action_name: str
    player_total: int
    dungeon_total: int
    success: bool
    details: str
    card_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "turn": self.turn,
            "action_name": self.action_name,
            "player_total": self.player_total,
            "dungeon_total": self.dungeon_total,
            "success": self.success,
            "details": self.details,
            "card_count": self.card_count,
        }


@dataclass(frozen=True)
class TurnResult:
    """The pending outcome of the last resolution."""
    player_cards: tuple[Card, ...]
    dungeon_card: Card  # value is the effective, post-modifier value
    success: bool
    margin: int
    damage: int
    message: str
    stat_bonus: int
    suit_bonus: int
    card_total: int  # after suit penalties and combo
    pending_record: TurnRecord
    action_key: str = ""
    combo: HandCombo | None = None
    damage_blocked: bool = False
    modifier_effect: str = ""
    rewound: bool = False

    @property
    def player_total(self) -> int:
        return self.card_total + self.stat_bonus + self.suit_bonus


# =============================================================================
# Game
# =============================================================================

@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    All state changes go through the reducer.
    """
    game_id: str
    player: PlayerState
    phase: GamePhase = GamePhase.SETUP
    difficulty: Difficulty = Difficulty.NORMAL
    settings: GameSettings = DEFAULT_SETTINGS
    round: int = 1
    turn: int = 1

    locations: tuple[AdventureLocation, ...] = ()

    player_pile: DeckPile = field(default_factory=lambda: DeckPile(name="player"))
    dungeon_pile: DeckPile = field(default_factory=lambda: DeckPile(name="dungeon"))
    hand: tuple[Card, ...] = ()

    turn_result: TurnResult | None = None
    history: tuple[TurnRecord, ...] = ()

    # random.Random.getstate() so draws are reproducible
    rng_state: Any = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def rng(self) -> random.Random:
        """A Random positioned at this state's stream."""
        rng = random.Random()
        if self.rng_state is not None:
            rng.setstate(self.rng_state)
        return rng

    def with_rng(self, rng: random.Random) -> GameState:
        return replace(self, rng_state=rng.getstate())

    def get_location(self, location_id: str) -> AdventureLocation | None:
        for location in self.locations:
            if location.location_id == location_id:
                return location
        return None

    def with_location(self, location: AdventureLocation) -> GameState:
        new_locations = tuple(
            location if loc.location_id == location.location_id else loc
            for loc in self.locations
        )
        return replace(self, locations=new_locations)

    def with_player(self, player: PlayerState) -> GameState:
        return replace(self, player=player)

    def find_in_hand(self, card_ids) -> tuple[Card, ...] | None:
        """Cards in hand for the given ids, or None if any id is missing."""
        by_id = {c.card_id: c for c in self.hand}
        cards = []
        for card_id in card_ids:
            card = by_id.get(card_id)
            if card is None:
                return None
            cards.append(card)
        return tuple(cards)

    def _copy_with(self, **kwargs) -> GameState:
        return replace(self, **kwargs)
