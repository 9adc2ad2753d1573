"""
Encounter Modifiers - Rolling and re-rolling the modifier of each encounter.

The deeper the encounter, the more likely and the harsher its modifier.
The last encounter of a route is a boss carrying an elite mechanic. At
each new round the encounters a player has not reached yet are re-rolled
at a higher difficulty scalar.
"""

from __future__ import annotations
from dataclasses import replace
import logging
import random

from .cards import SUIT_ORDER
from .state import AdventureLocation, EliteMechanic, ModifierKind, NodeModifier

logger = logging.getLogger(__name__)

POWER_FLOOR = 10


def generate_modifier(index: int, difficulty_scalar: int, rng: random.Random) -> NodeModifier | None:
    """
    Roll the modifier for the encounter at `index`, or None.

    The first encounter is usually safe. Hostile terrain is the most
    common result, then narrow passes, then suit bans.
    """
    if index == 0 and rng.random() > 0.3:
        return None

    chance = 0.3 + index * 0.1
    if rng.random() > chance:
        return None

    roll = rng.random()
    if roll < 0.5:
        added = int(index * 1.5) + difficulty_scalar + 1
        return NodeModifier(
            kind=ModifierKind.DIFFICULTY,
            value=added,
            name="Hostile Terrain",
            description=f"Dangerous footing. +{added} to Dungeon Card value.",
        )
    if roll < 0.75:
        limit = max(1, 4 - index // 3)
        return NodeModifier(
            kind=ModifierKind.MAX_CARDS,
            value=limit,
            name="Narrow Pass",
            description=f"Cramped space. You can play a maximum of {limit} cards.",
        )
    suit = rng.choice(SUIT_ORDER)
    title = suit.value.title()
    return NodeModifier(
        kind=ModifierKind.SUIT_PENALTY,
        name=f"{title} Ban",
        description=f"{title} cards contribute 0 value here.",
        target_suit=suit,
    )


def boss_modifier(difficulty_scalar: int, rng: random.Random) -> NodeModifier:
    """Elite mechanic guarding the last encounter."""
    if rng.random() < 0.5:
        value = 2 + difficulty_scalar
        return NodeModifier(
            kind=ModifierKind.ELITE_MECHANIC,
            value=value,
            name="Brutal Champion",
            description=f"+{value} to Dungeon Card value. Failure deals double damage.",
            elite=EliteMechanic.DOUBLE_DAMAGE,
        )
    value = 1 + difficulty_scalar
    return NodeModifier(
        kind=ModifierKind.ELITE_MECHANIC,
        value=value,
        name="Iron Warden",
        description=f"+{value} to Dungeon Card value, and never less than {POWER_FLOOR}.",
        elite=EliteMechanic.POWER_FLOOR,
        floor=POWER_FLOOR,
    )


def reroll_modifiers(location: AdventureLocation, difficulty_scalar: int, rng: random.Random) -> AdventureLocation:
    """
    Re-roll the modifiers at and past the cursor.

    Visited encounters keep theirs. The last route position is rolled as
    the boss. Only the arena entries the route points at are replaced, so
    branches not yet taken are left alone.
    """
    if location.is_cleared:
        return location

    encounters = list(location.encounters)
    last = len(location.route) - 1
    for position in range(location.current_encounter_index, len(location.route)):
        if position == last:
            modifier = boss_modifier(difficulty_scalar, rng)
        else:
            modifier = generate_modifier(position, difficulty_scalar, rng)
        arena_index = location.route[position]
        encounters[arena_index] = replace(encounters[arena_index], modifier=modifier)

    logger.debug("location %s: modifiers re-rolled at scalar %d", location.location_id, difficulty_scalar)
    return location._copy_with(encounters=tuple(encounters))
