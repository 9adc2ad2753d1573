"""
Flip Dungeon Locations - The four default locations and random ones.

Every encounter rolls a modifier and the last encounter of every
location is a boss carrying an elite mechanic. Longer locations fork
once near the start; the colour of the first card played there picks
the path.

All rolls use the caller's rng so a seed reproduces the whole map.
"""

from __future__ import annotations
from dataclasses import dataclass
import random

from ...engine_core.cards import SUIT_ORDER, Suit
from ...engine_core.modifiers import boss_modifier, generate_modifier
from ...engine_core.state import (
    AdventureLocation,
    Branch,
    CompletionReward,
    Encounter,
    ModifierKind,
    NodeModifier,
    RewardKind,
    StatAttribute,
    TRAINABLE_STATS,
)


FOREST_ENCOUNTERS = ["Overgrown Path", "Wolf Den", "Ancient Oak", "Whispering Creek", "Druid's Circle",
                     "Fairy Ring", "Thorny Thicket", "Bear Cave"]
DUNGEON_ENCOUNTERS = ["Rusty Gate", "Guard Room", "Dark Hallway", "Armory", "Torture Chamber",
                      "Underground Lake", "Crypt Entrance", "Dragon's Hoard"]
TOWER_ENCOUNTERS = ["Spiral Staircase", "Library", "Alchemy Lab", "Observatory", "Summoning Circle",
                    "Arcane Vault", "Wizard's Study", "Roof Peak"]
CITY_ENCOUNTERS = ["City Gates", "Market Square", "Tavern Brawl", "Thieves Alley", "Noble's Estate",
                   "Guard Post", "Sewers", "Royal Palace"]
GENERIC_ENCOUNTERS = ["Unknown Path", "Strange Landmark", "Hidden Trap", "Resting Spot", "Enemy Outpost"]

ADJECTIVES = ["Ancient", "Forgotten", "Cursed", "Hallowed", "Misty", "Burning", "Frozen", "Shadow",
              "Golden", "Crystal", "Silent", "Whispering"]
NOUNS = ["Ruins", "Caverns", "Peaks", "Shrine", "Depths", "Sanctuary", "Wasteland", "Crypt", "Grove",
         "Citadel", "Nexus", "Tomb"]

BRANCH_MIN_LENGTH = 4  # shorter locations never fork


def name_pool(location_name: str) -> list[str]:
    """Encounter names that suit a location name."""
    if "Forest" in location_name or "Grove" in location_name:
        return FOREST_ENCOUNTERS
    if "Dungeon" in location_name or "Crypt" in location_name:
        return DUNGEON_ENCOUNTERS
    if "Tower" in location_name or "Spire" in location_name:
        return TOWER_ENCOUNTERS
    if "City" in location_name or "Capital" in location_name:
        return CITY_ENCOUNTERS
    return GENERIC_ENCOUNTERS


# ============================================================================
# Encounters
# ============================================================================

def generate_branch(location_id: str, index: int, difficulty_scalar: int, rng: random.Random) -> Branch:
    """
    A fork: the red road is short and hostile, the black road long and quiet.
    """
    added = int(index * 1.5) + difficulty_scalar + 2
    red = (
        Encounter(
            encounter_id=f"{location_id}-{index}-red-0",
            name="Burning Road",
            modifier=NodeModifier(
                kind=ModifierKind.DIFFICULTY,
                value=added,
                name="Scorched Earth",
                description=f"+{added} to Dungeon Card value.",
            ),
        ),
    )
    black = tuple(
        Encounter(
            encounter_id=f"{location_id}-{index}-black-{i}",
            name=name,
            modifier=generate_modifier(0, difficulty_scalar, rng),
        )
        for i, name in enumerate(("Shadowed Trail", "Quiet Hollow"))
    )
    return Branch(text="Red for the Burning Road, Black for the Shadowed Trail", red=red, black=black)


def generate_encounters(
    location_id: str,
    count: int,
    difficulty_scalar: int,
    location_name: str,
    rng: random.Random,
) -> list[Encounter]:
    pool = name_pool(location_name)
    fork_at = 1 if count >= BRANCH_MIN_LENGTH else None
    encounters = []
    for i in range(count):
        name = rng.choice(pool)
        is_boss = i == count - 1
        if is_boss:
            name = "Boss: " + name
            modifier = boss_modifier(difficulty_scalar, rng)
        else:
            modifier = generate_modifier(i, difficulty_scalar, rng)
        branch = generate_branch(location_id, i, difficulty_scalar, rng) if i == fork_at else None
        encounters.append(Encounter(
            encounter_id=f"{location_id}-{i}",
            name=name,
            modifier=modifier,
            branch=branch,
        ))
    return encounters


# ============================================================================
# Locations
# ============================================================================

@dataclass(frozen=True)
class LocationTemplate:
    location_id: str
    name: str
    description: str
    nodes: int
    stat_attribute: StatAttribute
    preferred_suit: Suit
    completion_reward: CompletionReward


DEFAULT_LOCATIONS = (
    LocationTemplate(
        location_id="forest",
        name="Whispering Forest",
        description="A dense thicket teeming with life.",
        nodes=5,
        stat_attribute=StatAttribute.SPIRIT,
        preferred_suit=Suit.CLUBS,
        completion_reward=CompletionReward(kind=RewardKind.XP, amount=3),
    ),
    LocationTemplate(
        location_id="dungeon",
        name="Deep Dungeon",
        description="Dark corridors filled with ancient treasure.",
        nodes=8,
        stat_attribute=StatAttribute.MIGHT,
        preferred_suit=Suit.SPADES,
        completion_reward=CompletionReward(kind=RewardKind.ARTIFACT, name="Crown of the Deep"),
    ),
    LocationTemplate(
        location_id="tower",
        name="Mage Tower",
        description="Arcane libraries and magical anomalies.",
        nodes=4,
        stat_attribute=StatAttribute.WISDOM,
        preferred_suit=Suit.DIAMONDS,
        completion_reward=CompletionReward(kind=RewardKind.MANA, amount=5),
    ),
    LocationTemplate(
        location_id="city",
        name="Capital City",
        description="Bustling streets of commerce and intrigue.",
        nodes=3,
        stat_attribute=StatAttribute.AGILITY,
        preferred_suit=Suit.HEARTS,
        completion_reward=CompletionReward(kind=RewardKind.GOLD, amount=5),
    ),
)


def build_location(template: LocationTemplate, difficulty_scalar: int, rng: random.Random) -> AdventureLocation:
    return AdventureLocation.create(
        location_id=template.location_id,
        name=template.name,
        stat_attribute=template.stat_attribute,
        preferred_suit=template.preferred_suit,
        completion_reward=template.completion_reward,
        encounters=generate_encounters(
            template.location_id, template.nodes, difficulty_scalar, template.name, rng,
        ),
        description=template.description,
    )


def default_locations(rng: random.Random, difficulty_scalar: int = 0) -> tuple[AdventureLocation, ...]:
    return tuple(build_location(t, difficulty_scalar, rng) for t in DEFAULT_LOCATIONS)


def random_reward(rng: random.Random) -> CompletionReward:
    kind = rng.choice([RewardKind.GOLD, RewardKind.XP, RewardKind.MANA, RewardKind.ITEM, RewardKind.STAT_POINT])
    if kind is RewardKind.ITEM:
        return CompletionReward(kind=kind, name=rng.choice(["Lucky Coin", "Old Map", "Silver Key"]))
    if kind is RewardKind.STAT_POINT:
        return CompletionReward(kind=kind, stat=rng.choice(TRAINABLE_STATS))
    return CompletionReward(kind=kind, amount=rng.randint(3, 5))


def generate_random_location(round_number: int, rng: random.Random, index: int = 0) -> AdventureLocation:
    """A procedurally named location of 3 to 6 encounters."""
    adjective = rng.choice(ADJECTIVES)
    noun = rng.choice(NOUNS)
    name = f"{adjective} {noun}"
    location_id = f"loc-{round_number}-{index}-{rng.getrandbits(24):06x}"
    stat = rng.choice(TRAINABLE_STATS)

    template = LocationTemplate(
        location_id=location_id,
        name=name,
        description=f"A {adjective.lower()} place of power. Test your {stat.value} here.",
        nodes=rng.randint(3, 6),
        stat_attribute=stat,
        preferred_suit=rng.choice(SUIT_ORDER),
        completion_reward=random_reward(rng),
    )
    return build_location(template, round_number * 2, rng)
