"""
Tests for the player ledger: resources, alignment, purchases, abilities
and quests.
"""

from dataclasses import replace

from ..engine_core.catalog import AbilityEffect, ClassAbility
from ..engine_core.ledger import (
    activate_ability,
    apply_damage,
    buy_item,
    buy_time_warp,
    can_activate,
    check_quests,
    clear_round_effects,
    criterion_met,
    dark_pact,
    evil_decay,
    grant_completion_reward,
    heal,
    level_up,
    purify,
    refund_damage,
    spend_mana,
    upgrade_stat,
)
from ..engine_core.settings import DEFAULT_SETTINGS
from ..engine_core.state import (
    ActiveEffects,
    CharacterClass,
    CompletionReward,
    CriterionType,
    PlayerState,
    PlayerStats,
    Quest,
    QuestCriterion,
    Resources,
    RewardKind,
    Scoring,
    StatAttribute,
)
from ..games.flip_dungeon import DEFAULT_CATALOG, QUEST_TEMPLATES


def player(health=10, max_health=10, mana=0, gold=0, xp=0,
           character_class=CharacterClass.DRUID, **kwargs) -> PlayerState:
    kwargs.setdefault("stats", PlayerStats(level=1, might=1, agility=2, wisdom=3, spirit=4))
    return PlayerState(
        character_class=character_class,
        resources=Resources(health=health, max_health=max_health, mana=mana, gold=gold, xp=xp),
        **kwargs,
    )


def ability_of(character_class):
    return DEFAULT_CATALOG.ability_for(character_class)


class TestResources:
    """Tests for health and mana."""

    def test_heal_clamps_to_max(self):
        assert heal(player(health=8), 5).resources.health == 10

    def test_damage_floors_at_zero(self):
        p = apply_damage(player(health=3), 8)
        assert p.resources.health == 0
        assert p.damage_taken == 8
        assert not p.is_alive

    def test_refund_undoes_damage(self):
        p = refund_damage(apply_damage(player(health=10), 4), 4)
        assert p.resources.health == 10
        assert p.damage_taken == 0

    def test_spend_mana_rejects_with_same_object(self):
        p = player(mana=1)
        assert spend_mana(p, 2) is p
        assert spend_mana(player(mana=3), 2).resources.mana == 1


class TestAlignment:
    """Tests for dark pact and purify."""

    def test_dark_pact(self):
        p = dark_pact(player(mana=1), DEFAULT_SETTINGS)
        assert p.resources.mana == 6
        assert p.alignment == -3

    def test_dark_pact_clamps_alignment(self):
        p = dark_pact(player(alignment=-9), DEFAULT_SETTINGS)
        assert p.alignment == -10
        assert p.resources.mana == 5

    def test_purify(self):
        p = purify(player(health=5, mana=3), DEFAULT_SETTINGS)
        assert p.resources.health == 8
        assert p.resources.mana == 1
        assert p.alignment == 2

    def test_purify_clamps(self):
        p = purify(player(health=9, mana=2, alignment=9), DEFAULT_SETTINGS)
        assert p.resources.health == 10
        assert p.alignment == 10

    def test_purify_needs_mana(self):
        p = player(mana=1)
        assert purify(p, DEFAULT_SETTINGS) is p

    def test_evil_decay(self):
        assert evil_decay(player(alignment=-5), DEFAULT_SETTINGS).resources.health == 9
        p = player(alignment=-4)
        assert evil_decay(p, DEFAULT_SETTINGS) is p


class TestPurchases:
    """Tests for XP and gold spending."""

    def test_upgrade_stat_cost(self):
        p = upgrade_stat(player(xp=5), StatAttribute.WISDOM, DEFAULT_SETTINGS)
        assert p.stats.wisdom == 4
        assert p.resources.xp == 1

    def test_upgrade_stat_needs_xp(self):
        p = player(xp=3)
        assert upgrade_stat(p, StatAttribute.WISDOM, DEFAULT_SETTINGS) is p

    def test_level_is_not_upgradable(self):
        p = player(xp=50)
        assert upgrade_stat(p, StatAttribute.LEVEL, DEFAULT_SETTINGS) is p

    def test_level_up(self):
        p = level_up(player(health=3, xp=6), DEFAULT_SETTINGS)
        assert p.stats.level == 2
        assert p.resources.xp == 1
        assert p.resources.max_health == 12
        assert p.resources.health == 12

    def test_level_up_cost_scales(self):
        p = player(xp=9, stats=PlayerStats(level=2))
        assert level_up(p, DEFAULT_SETTINGS) is p

    def test_buy_buff_item(self):
        whetstone = DEFAULT_CATALOG.get_item("Whetstone")
        p = buy_item(player(gold=4), whetstone)
        assert p.resources.gold == 1
        assert p.effects.might == 2
        assert p.items == ("Whetstone",)
        assert p.stat_bonus(StatAttribute.MIGHT) == 3

    def test_buy_potion(self):
        potion = DEFAULT_CATALOG.get_item("potion")
        p = buy_item(player(health=4, gold=5), potion)
        assert p.resources.health == 7
        assert p.resources.gold == 0
        assert p.items == ()

    def test_buy_needs_gold(self):
        p = player(gold=2)
        assert buy_item(p, DEFAULT_CATALOG.get_item("Boots")) is p

    def test_time_warp_escalates(self):
        p = buy_time_warp(player(mana=3))
        assert p.resources.mana == 2
        assert p.extra_turns_bought == 1
        p = buy_time_warp(p)
        assert p.resources.mana == 0
        assert p.extra_turns_bought == 2
        assert buy_time_warp(p) is p


class TestAbilities:
    """Tests for class abilities."""

    def test_druid_heals(self):
        p = activate_ability(player(health=4, mana=2), ability_of(CharacterClass.DRUID), DEFAULT_SETTINGS)
        assert p.resources.health == 8
        assert p.resources.mana == 0
        assert p.ability_cooldown == 3

    def test_ranger_auto_crit(self):
        p = player(mana=3, character_class=CharacterClass.RANGER)
        p = activate_ability(p, ability_of(CharacterClass.RANGER), DEFAULT_SETTINGS)
        assert p.effects.auto_crit

    def test_paladin_block(self):
        p = player(mana=2, character_class=CharacterClass.PALADIN)
        p = activate_ability(p, ability_of(CharacterClass.PALADIN), DEFAULT_SETTINGS)
        assert p.effects.damage_block

    def test_alchemist_transmute(self):
        p = player(mana=3, character_class=CharacterClass.ALCHEMIST)
        p = activate_ability(p, ability_of(CharacterClass.ALCHEMIST), DEFAULT_SETTINGS)
        assert p.resources.gold == 4
        assert p.resources.mana == 0

    def test_necromancer_blood_rite(self):
        p = player(health=5, character_class=CharacterClass.NECROMANCER)
        p = activate_ability(p, ability_of(CharacterClass.NECROMANCER), DEFAULT_SETTINGS)
        assert p.resources.health == 3
        assert p.resources.mana == 4
        assert p.alignment == -1

    def test_blood_rite_never_kills(self):
        p = player(health=2, character_class=CharacterClass.NECROMANCER)
        assert not can_activate(p, ability_of(CharacterClass.NECROMANCER))
        assert activate_ability(p, ability_of(CharacterClass.NECROMANCER), DEFAULT_SETTINGS) is p

    def test_bard_inspires_every_stat(self):
        p = player(mana=2, character_class=CharacterClass.BARD)
        p = activate_ability(p, ability_of(CharacterClass.BARD), DEFAULT_SETTINGS)
        assert (p.effects.might, p.effects.agility, p.effects.wisdom, p.effects.spirit) == (2, 2, 2, 2)

    def test_cooldown_blocks(self):
        p = player(mana=10, ability_cooldown=1)
        assert activate_ability(p, ability_of(CharacterClass.DRUID), DEFAULT_SETTINGS) is p

    def test_round_boundary_clears_effects(self):
        p = player(effects=ActiveEffects(might=2, auto_crit=True, damage_block=True))
        assert clear_round_effects(p).effects == ActiveEffects()

    def test_custom_ability_shifts_alignment(self):
        ability = ClassAbility(name="Prayer", description="", effect=AbilityEffect.HEAL,
                               mana_cost=1, amount=1, alignment_shift=2)
        p = activate_ability(player(mana=1), ability, DEFAULT_SETTINGS)
        assert p.alignment == 2


class TestCompletionRewards:
    """Tests for location completion rewards."""

    def test_gold_reward(self):
        p = grant_completion_reward(player(), CompletionReward(kind=RewardKind.GOLD, amount=5), DEFAULT_SETTINGS)
        assert p.resources.gold == 5
        assert p.locations_cleared == 1
        assert p.alignment == 1

    def test_artifact_reward(self):
        reward = CompletionReward(kind=RewardKind.ARTIFACT, name="Crown of the Deep")
        p = grant_completion_reward(player(), reward, DEFAULT_SETTINGS)
        assert p.artifacts == ("Crown of the Deep",)

    def test_stat_point_reward(self):
        reward = CompletionReward(kind=RewardKind.STAT_POINT, stat=StatAttribute.MIGHT)
        p = grant_completion_reward(player(), reward, DEFAULT_SETTINGS)
        assert p.stats.might == 2


class TestQuests:
    """Tests for quest completion."""

    def quest(self, quest_id):
        return next(q for q in QUEST_TEMPLATES if q.quest_id == quest_id)

    def test_no_change_returns_same_object(self):
        p = player(quests=(self.quest("the_hoarder"),))
        assert check_quests(p) is p

    def test_all_criteria_must_hold(self):
        p = player(gold=10, mana=9, quests=(self.quest("the_hoarder"),))
        assert not check_quests(p).quests[0].is_completed
        p = player(gold=10, mana=10, quests=(self.quest("the_hoarder"),))
        assert check_quests(p).quests[0].is_completed

    def test_completion_is_monotonic(self):
        p = check_quests(player(gold=10, mana=10, quests=(self.quest("the_hoarder"),)))
        p = p.with_resources(gold=0, mana=0)
        assert check_quests(p).quests[0].is_completed

    def test_evil_target_is_at_or_below(self):
        criterion = QuestCriterion(type=CriterionType.ALIGNMENT, target=-8)
        assert criterion_met(player(alignment=-8), criterion)
        assert criterion_met(player(alignment=-10), criterion)
        assert not criterion_met(player(alignment=-7), criterion)

    def test_scoring_criterion(self):
        quest = Quest(
            quest_id="q", name="Q", bonus_points=5,
            criteria=(QuestCriterion(type=CriterionType.SCORING, target=2, subject="explore"),),
        )
        p = player(quests=(quest,), scoring=Scoring(explore=2))
        assert check_quests(p).quests[0].is_completed

    def test_item_and_location_criteria(self):
        quest = Quest(
            quest_id="q", name="Q", bonus_points=5,
            criteria=(
                QuestCriterion(type=CriterionType.ITEM_COUNT, target=1),
                QuestCriterion(type=CriterionType.LOCATION_CLEARED, target=1),
            ),
        )
        p = player(quests=(quest,), items=("Boots",))
        assert not check_quests(p).quests[0].is_completed
        p = replace(p, locations_cleared=1)
        assert check_quests(p).quests[0].is_completed
