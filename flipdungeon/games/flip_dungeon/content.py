"""
Flip Dungeon Content - Character classes, abilities and the shop.
"""

from ...engine_core.catalog import (
    AbilityEffect,
    Catalog,
    ClassAbility,
    ClassDefinition,
    ShopItem,
)
from ...engine_core.state import CharacterClass, PlayerStats, StatAttribute


# ============================================================================
# Classes
# ============================================================================

DRUID = ClassDefinition(
    character_class=CharacterClass.DRUID,
    stats=PlayerStats(level=1, might=1, agility=2, wisdom=3, spirit=4),
    description="Masters of nature. Balanced stats with high Spirit.",
    ability=ClassAbility(
        name="Nature's Grace",
        description="Heal 4 health.",
        effect=AbilityEffect.HEAL,
        mana_cost=2,
        amount=4,
    ),
)

RANGER = ClassDefinition(
    character_class=CharacterClass.RANGER,
    stats=PlayerStats(level=1, might=2, agility=4, wisdom=2, spirit=1),
    description="Expert marksmen and trackers. High Agility.",
    ability=ClassAbility(
        name="Eagle Eye",
        description="Your next action is a critical success.",
        effect=AbilityEffect.AUTO_CRIT,
        mana_cost=3,
    ),
)

PALADIN = ClassDefinition(
    character_class=CharacterClass.PALADIN,
    stats=PlayerStats(level=1, might=4, agility=1, wisdom=2, spirit=3),
    description="Holy warriors. High Might and defense capabilities.",
    ability=ClassAbility(
        name="Divine Shield",
        description="Block all damage from your next failure.",
        effect=AbilityEffect.DAMAGE_BLOCK,
        mana_cost=2,
    ),
)

ALCHEMIST = ClassDefinition(
    character_class=CharacterClass.ALCHEMIST,
    stats=PlayerStats(level=1, might=1, agility=3, wisdom=4, spirit=2),
    description="Seekers of transmutation. High Wisdom for magic.",
    ability=ClassAbility(
        name="Transmute",
        description="Turn 3 mana into 4 gold.",
        effect=AbilityEffect.TRANSMUTE,
        mana_cost=3,
        amount=4,
    ),
)

NECROMANCER = ClassDefinition(
    character_class=CharacterClass.NECROMANCER,
    stats=PlayerStats(level=1, might=1, agility=1, wisdom=4, spirit=4),
    description="Wielders of dark arts. High Wisdom and Spirit.",
    ability=ClassAbility(
        name="Blood Rite",
        description="Sacrifice 2 health for 4 mana. Alignment -1.",
        effect=AbilityEffect.BLOOD_RITE,
        amount=4,
        health_cost=2,
        alignment_shift=-1,
    ),
)

BARD = ClassDefinition(
    character_class=CharacterClass.BARD,
    stats=PlayerStats(level=1, might=1, agility=3, wisdom=3, spirit=3),
    description="Jacks of all trades. Good Agility, Wisdom and Spirit.",
    ability=ClassAbility(
        name="Inspiring Song",
        description="+2 to every stat for the rest of the round.",
        effect=AbilityEffect.INSPIRE,
        mana_cost=2,
        amount=2,
    ),
)

CLASSES = {d.character_class: d for d in (DRUID, RANGER, PALADIN, ALCHEMIST, NECROMANCER, BARD)}


# ============================================================================
# Shop
# ============================================================================

SHOP_ITEMS = (
    ShopItem(name="Potion", cost=5, description="Restore 3 health.", heal=3),
    ShopItem(name="Whetstone", cost=3, description="+2 Might this round.", stat=StatAttribute.MIGHT),
    ShopItem(name="Boots", cost=3, description="+2 Agility this round.", stat=StatAttribute.AGILITY),
    ShopItem(name="Scroll", cost=3, description="+2 Wisdom this round.", stat=StatAttribute.WISDOM),
    ShopItem(name="Charm", cost=3, description="+2 Spirit this round.", stat=StatAttribute.SPIRIT),
)


DEFAULT_CATALOG = Catalog(classes=CLASSES, shop=SHOP_ITEMS)
