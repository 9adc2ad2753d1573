"""
Catalog - Definitions the ledger needs: classes, abilities, shop items.

The catalog is data. The default content lives in
games/flip_dungeon/content.py; tests and custom modes can build their own.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from .state import CharacterClass, PlayerStats, StatAttribute


class AbilityEffect(Enum):
    """Closed set of class ability effects."""
    HEAL = "heal"  # restore `amount` health
    AUTO_CRIT = "auto_crit"  # next resolution succeeds with margin 10
    DAMAGE_BLOCK = "damage_block"  # next failure deals no damage
    TRANSMUTE = "transmute"  # mana -> `amount` gold
    BLOOD_RITE = "blood_rite"  # health -> `amount` mana
    INSPIRE = "inspire"  # +`amount` round buff to every trainable stat


@dataclass(frozen=True)
class ClassAbility:
    name: str
    description: str
    effect: AbilityEffect
    mana_cost: int = 0
    amount: int = 0
    health_cost: int = 0
    alignment_shift: int = 0
    cooldown: int = 3


@dataclass(frozen=True)
class ClassDefinition:
    character_class: CharacterClass
    stats: PlayerStats
    description: str
    ability: ClassAbility


@dataclass(frozen=True)
class ShopItem:
    """
    A shop purchase.

    Buff items grant `amount` to `stat` for the rest of the round and are
    kept in the inventory. Potions heal `amount` and are consumed.
    """
    name: str
    cost: int
    description: str
    stat: StatAttribute | None = None
    heal: int = 0
    amount: int = 2


@dataclass(frozen=True)
class Catalog:
    classes: dict[CharacterClass, ClassDefinition] = field(default_factory=dict)
    shop: tuple[ShopItem, ...] = ()

    def class_definition(self, character_class: CharacterClass) -> ClassDefinition:
        return self.classes[character_class]

    def ability_for(self, character_class: CharacterClass) -> ClassAbility | None:
        definition = self.classes.get(character_class)
        return definition.ability if definition else None

    def get_item(self, name: str) -> ShopItem | None:
        for item in self.shop:
            if item.name.lower() == name.lower():
                return item
        return None
