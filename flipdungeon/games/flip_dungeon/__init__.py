"""
Flip Dungeon - The default game mode

Spend playing cards against a drawn dungeon card to rest, train, loot,
study, or explore branching locations over three rounds of five turns.

This module contains:
- Character classes, abilities and the shop
- Location and encounter generation
- Quest templates
- New-game setup
"""

from .content import DEFAULT_CATALOG, CLASSES, SHOP_ITEMS
from .locations import default_locations, generate_random_location, generate_modifier
from .quests import QUEST_TEMPLATES, generate_quests
from .setup import new_game

__all__ = [
    "DEFAULT_CATALOG",
    "CLASSES",
    "SHOP_ITEMS",
    "default_locations",
    "generate_random_location",
    "generate_modifier",
    "QUEST_TEMPLATES",
    "generate_quests",
    "new_game",
]
