"""
Flip Dungeon Quests - Quest templates and the per-game draw.
"""

from __future__ import annotations
import random

from ...engine_core.state import CriterionType, Quest, QuestCriterion


def _c(ctype: CriterionType, target: int, description: str, subject: str | None = None) -> QuestCriterion:
    return QuestCriterion(type=ctype, target=target, subject=subject, description=description)


QUEST_TEMPLATES = (
    Quest(
        quest_id="jack_of_all_trades",
        name="Jack of All Trades",
        description="Achieve a balanced skill set across all disciplines.",
        bonus_points=15,
        criteria=(
            _c(CriterionType.SCORING, 5, "5 Explore Score", "explore"),
            _c(CriterionType.SCORING, 5, "5 Champion Score", "champion"),
            _c(CriterionType.SCORING, 5, "5 Fortune Score", "fortune"),
            _c(CriterionType.SCORING, 5, "5 Soul Score", "soul"),
        ),
    ),
    Quest(
        quest_id="the_hoarder",
        name="The Hoarder",
        description="Amass a significant amount of resources simultaneously.",
        bonus_points=10,
        criteria=(
            _c(CriterionType.RESOURCE, 10, "Hold 10 Gold", "gold"),
            _c(CriterionType.RESOURCE, 10, "Hold 10 Mana", "mana"),
        ),
    ),
    Quest(
        quest_id="grand_archmage",
        name="Grand Archmage",
        description="Reach the pinnacle of magical understanding.",
        bonus_points=10,
        criteria=(
            _c(CriterionType.STAT, 6, "Reach 6 Wisdom", "wisdom"),
            _c(CriterionType.RESOURCE, 15, "Hold 15 Mana", "mana"),
        ),
    ),
    Quest(
        quest_id="dungeon_crawler",
        name="Dungeon Crawler",
        description="Clear multiple locations and prove your might.",
        bonus_points=12,
        criteria=(
            _c(CriterionType.LOCATION_CLEARED, 2, "Clear 2 Locations"),
            _c(CriterionType.STAT, 5, "Reach 5 Might", "might"),
        ),
    ),
    Quest(
        quest_id="saintly_path",
        name="Saintly Path",
        description="Maintain pure virtue while gaining spirit.",
        bonus_points=15,
        criteria=(
            _c(CriterionType.ALIGNMENT, 8, "Reach +8 Alignment"),
            _c(CriterionType.STAT, 6, "Reach 6 Spirit", "spirit"),
        ),
    ),
    Quest(
        quest_id="dark_overlord",
        name="Dark Overlord",
        description="Embrace the darkness and accumulate power.",
        bonus_points=15,
        criteria=(
            _c(CriterionType.ALIGNMENT, -8, "Reach -8 Alignment"),
            _c(CriterionType.STAT, 3, "Reach Player Level 3", "level"),
        ),
    ),
    Quest(
        quest_id="merchant_prince",
        name="Merchant Prince",
        description="Collect a variety of items from the shop.",
        bonus_points=10,
        criteria=(
            _c(CriterionType.ITEM_COUNT, 4, "Own 4 Items"),
            _c(CriterionType.RESOURCE, 5, "Hold 5 Gold", "gold"),
        ),
    ),
    Quest(
        quest_id="untouchable",
        name="Untouchable",
        description="Complete objectives while minimizing harm.",
        bonus_points=20,
        criteria=(
            _c(CriterionType.SCORING, 10, "10 Champion Score", "champion"),
            _c(CriterionType.RESOURCE, 15, "Reach 15 Health", "health"),
        ),
    ),
    Quest(
        quest_id="legendary_hero",
        name="Legendary Hero",
        description="Reach a high level of experience.",
        bonus_points=10,
        criteria=(
            _c(CriterionType.STAT, 4, "Reach Player Level 4", "level"),
        ),
    ),
    Quest(
        quest_id="cartographer",
        name="Cartographer",
        description="Explore the world extensively.",
        bonus_points=12,
        criteria=(
            _c(CriterionType.LOCATION_CLEARED, 3, "Clear 3 Locations"),
            _c(CriterionType.SCORING, 15, "15 Explore Score", "explore"),
        ),
    ),
)


def generate_quests(rng: random.Random, count: int = 4) -> tuple[Quest, ...]:
    """Draw `count` distinct quests for a new game."""
    count = max(0, min(count, len(QUEST_TEMPLATES)))
    return tuple(rng.sample(QUEST_TEMPLATES, count))
