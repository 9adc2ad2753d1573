"""
Player Ledger - Resource, alignment and quest mutations.

Every function has the shape (PlayerState, ...) -> PlayerState. When a
precondition fails (not enough mana, gold, xp, ...) the very same
PlayerState object is returned. That is a rejected transition, not an
error; callers detect it with `is`.
"""

from __future__ import annotations
from dataclasses import replace
import logging

from .catalog import AbilityEffect, ClassAbility, ShopItem
from .resolver import RewardBundle
from .settings import GameSettings
from .state import (
    ActiveEffects,
    CompletionReward,
    CriterionType,
    PlayerState,
    QuestCriterion,
    RewardKind,
    StatAttribute,
    TRAINABLE_STATS,
)

logger = logging.getLogger(__name__)


DARK_PACT_MANA = 5
DARK_PACT_ALIGNMENT = -3
PURIFY_COST = 2
PURIFY_HEAL = 3
PURIFY_ALIGNMENT = 2
MULLIGAN_COST = 1
REWIND_COST = 2
LEVEL_UP_MAX_HEALTH = 2
COMPLETION_ALIGNMENT = 1


# =============================================================================
# Health and resources
# =============================================================================

def heal(player: PlayerState, amount: int) -> PlayerState:
    r = player.resources
    return player.with_resources(health=min(r.max_health, r.health + amount))


def apply_damage(player: PlayerState, damage: int) -> PlayerState:
    """Reduce health (floored at 0) and add to lifetime damage taken."""
    if damage <= 0:
        return player
    return player._copy_with(
        resources=replace(player.resources, health=max(0, player.resources.health - damage)),
        damage_taken=player.damage_taken + damage,
    )


def refund_damage(player: PlayerState, damage: int) -> PlayerState:
    """Undo damage from a rewound attempt."""
    if damage <= 0:
        return player
    r = player.resources
    return player._copy_with(
        resources=replace(r, health=min(r.max_health, r.health + damage)),
        damage_taken=max(0, player.damage_taken - damage),
    )


def spend_mana(player: PlayerState, amount: int) -> PlayerState:
    if amount <= 0:
        return player
    if player.resources.mana < amount:
        return player
    return player.with_resources(mana=player.resources.mana - amount)


def shift_alignment(player: PlayerState, delta: int, settings: GameSettings) -> PlayerState:
    return player._copy_with(alignment=settings.clamp_alignment(player.alignment + delta))


def apply_resolution(player: PlayerState, rewards: RewardBundle) -> PlayerState:
    """Fold a successful resolution's rewards into the player."""
    r = player.resources
    resources = replace(
        r,
        health=min(r.max_health, r.health + rewards.heal),
        xp=r.xp + rewards.xp,
        gold=r.gold + rewards.gold,
        mana=r.mana + rewards.mana,
    )
    return player._copy_with(resources=resources, scoring=player.scoring.add(rewards.scoring))


def consume_effects(player: PlayerState, auto_crit: bool = False, damage_block: bool = False) -> PlayerState:
    """Clear one-shot flags that a resolution used."""
    if not auto_crit and not damage_block:
        return player
    effects = player.effects
    if auto_crit:
        effects = replace(effects, auto_crit=False)
    if damage_block:
        effects = replace(effects, damage_block=False)
    return player._copy_with(effects=effects)


# =============================================================================
# Alignment actions
# =============================================================================

def dark_pact(player: PlayerState, settings: GameSettings) -> PlayerState:
    """+5 mana for 3 alignment. Always available."""
    player = player.with_resources(mana=player.resources.mana + DARK_PACT_MANA)
    return shift_alignment(player, DARK_PACT_ALIGNMENT, settings)


def purify(player: PlayerState, settings: GameSettings) -> PlayerState:
    """Spend 2 mana to heal 3 and gain 2 alignment."""
    paid = spend_mana(player, PURIFY_COST)
    if paid is player:
        return player
    return shift_alignment(heal(paid, PURIFY_HEAL), PURIFY_ALIGNMENT, settings)


# =============================================================================
# Progression purchases
# =============================================================================

def stat_upgrade_cost(player: PlayerState, stat: StatAttribute, settings: GameSettings) -> int:
    return (player.stats.get(stat) + 1) * settings.xp_base_cost


def level_up_cost(player: PlayerState, settings: GameSettings) -> int:
    return player.stats.level * settings.xp_level_up_mult


def upgrade_stat(player: PlayerState, stat: StatAttribute, settings: GameSettings) -> PlayerState:
    if stat not in TRAINABLE_STATS:
        return player
    cost = stat_upgrade_cost(player, stat, settings)
    if player.resources.xp < cost:
        return player
    return player._copy_with(
        stats=player.stats.with_stat(stat, player.stats.get(stat) + 1),
        resources=replace(player.resources, xp=player.resources.xp - cost),
    )


def level_up(player: PlayerState, settings: GameSettings) -> PlayerState:
    """Raise the player level: +2 max health and a full heal."""
    cost = level_up_cost(player, settings)
    if player.resources.xp < cost:
        return player
    max_health = player.resources.max_health + LEVEL_UP_MAX_HEALTH
    return player._copy_with(
        stats=player.stats.with_stat(StatAttribute.LEVEL, player.stats.level + 1),
        resources=replace(player.resources, xp=player.resources.xp - cost,
                          max_health=max_health, health=max_health),
    )


def buy_item(player: PlayerState, item: ShopItem) -> PlayerState:
    if player.resources.gold < item.cost:
        return player
    player = player.with_resources(gold=player.resources.gold - item.cost)
    if item.heal:
        player = heal(player, item.heal)
    if item.stat is not None:
        player = player._copy_with(
            effects=player.effects.with_buff(item.stat, item.amount),
            items=player.items + (item.name,),
        )
    return player


def pay_mulligan(player: PlayerState) -> PlayerState:
    return spend_mana(player, MULLIGAN_COST)


def pay_rewind(player: PlayerState) -> PlayerState:
    return spend_mana(player, REWIND_COST)


def time_warp_cost(player: PlayerState) -> int:
    """Escalates with each purchase: 1, 2, 3, ..."""
    return player.extra_turns_bought + 1


def buy_time_warp(player: PlayerState) -> PlayerState:
    paid = spend_mana(player, time_warp_cost(player))
    if paid is player:
        return player
    return paid._copy_with(extra_turns_bought=player.extra_turns_bought + 1)


# =============================================================================
# Class abilities
# =============================================================================

def can_activate(player: PlayerState, ability: ClassAbility) -> bool:
    if player.ability_cooldown > 0:
        return False
    if player.resources.mana < ability.mana_cost:
        return False
    # Never let an ability kill the caster
    if ability.health_cost and player.resources.health <= ability.health_cost:
        return False
    return True


def activate_ability(player: PlayerState, ability: ClassAbility, settings: GameSettings) -> PlayerState:
    if not can_activate(player, ability):
        return player

    r = player.resources
    player = player._copy_with(
        resources=replace(r, mana=r.mana - ability.mana_cost),
        ability_cooldown=ability.cooldown,
    )
    if ability.health_cost:
        player = player._copy_with(
            resources=replace(player.resources, health=player.resources.health - ability.health_cost),
        )

    effect = ability.effect
    if effect is AbilityEffect.HEAL:
        player = heal(player, ability.amount)
    elif effect is AbilityEffect.AUTO_CRIT:
        player = player._copy_with(effects=replace(player.effects, auto_crit=True))
    elif effect is AbilityEffect.DAMAGE_BLOCK:
        player = player._copy_with(effects=replace(player.effects, damage_block=True))
    elif effect is AbilityEffect.TRANSMUTE:
        player = player.with_resources(gold=player.resources.gold + ability.amount)
    elif effect is AbilityEffect.BLOOD_RITE:
        player = player.with_resources(mana=player.resources.mana + ability.amount)
    elif effect is AbilityEffect.INSPIRE:
        effects = player.effects
        for stat in TRAINABLE_STATS:
            effects = effects.with_buff(stat, ability.amount)
        player = player._copy_with(effects=effects)
    else:
        raise ValueError(f"Unhandled ability effect: {effect}")

    if ability.alignment_shift:
        player = shift_alignment(player, ability.alignment_shift, settings)
    return player


# =============================================================================
# Locations
# =============================================================================

def grant_completion_reward(player: PlayerState, reward: CompletionReward,
                            settings: GameSettings) -> PlayerState:
    """Reward for clearing a location: the reward itself, +1 cleared, +1 alignment."""
    kind = reward.kind
    if kind is RewardKind.GOLD:
        player = player.with_resources(gold=player.resources.gold + reward.amount)
    elif kind is RewardKind.XP:
        player = player.with_resources(xp=player.resources.xp + reward.amount)
    elif kind is RewardKind.MANA:
        player = player.with_resources(mana=player.resources.mana + reward.amount)
    elif kind is RewardKind.ITEM:
        player = player._copy_with(items=player.items + (reward.name,))
    elif kind is RewardKind.ARTIFACT:
        player = player._copy_with(artifacts=player.artifacts + (reward.name,))
    elif kind is RewardKind.STAT_POINT:
        stat = reward.stat
        player = player._copy_with(stats=player.stats.with_stat(stat, player.stats.get(stat) + reward.amount))
    else:
        raise ValueError(f"Unhandled reward kind: {kind}")

    player = player._copy_with(locations_cleared=player.locations_cleared + 1)
    return shift_alignment(player, COMPLETION_ALIGNMENT, settings)


# =============================================================================
# Turn boundaries
# =============================================================================

def evil_decay(player: PlayerState, settings: GameSettings) -> PlayerState:
    """At or below the evil threshold, each turn costs 1 health."""
    if player.alignment <= settings.evil_threshold:
        return apply_damage(player, 1)
    return player


def tick_cooldown(player: PlayerState) -> PlayerState:
    if player.ability_cooldown <= 0:
        return player
    return player._copy_with(ability_cooldown=player.ability_cooldown - 1)


def clear_round_effects(player: PlayerState) -> PlayerState:
    return player._copy_with(effects=ActiveEffects())


# =============================================================================
# Quests
# =============================================================================

def criterion_progress(player: PlayerState, criterion: QuestCriterion) -> int:
    """Current value the criterion is measured against."""
    ctype = criterion.type
    if ctype is CriterionType.RESOURCE:
        return getattr(player.resources, criterion.subject)
    if ctype is CriterionType.STAT:
        return player.stats.get(StatAttribute(criterion.subject))
    if ctype is CriterionType.SCORING:
        return getattr(player.scoring, criterion.subject)
    if ctype is CriterionType.ITEM_COUNT:
        return len(player.items)
    if ctype is CriterionType.LOCATION_CLEARED:
        return player.locations_cleared
    if ctype is CriterionType.ALIGNMENT:
        return player.alignment
    raise ValueError(f"Unhandled criterion type: {ctype}")


def criterion_met(player: PlayerState, criterion: QuestCriterion) -> bool:
    value = criterion_progress(player, criterion)
    # Negative alignment targets are evil goals: at or below
    if criterion.type is CriterionType.ALIGNMENT and criterion.target < 0:
        return value <= criterion.target
    return value >= criterion.target


def check_quests(player: PlayerState) -> PlayerState:
    """
    Complete every quest whose criteria all hold.

    Completion is one-way. Returns the same object when nothing changed.
    """
    changed = False
    quests = []
    for quest in player.quests:
        if not quest.is_completed and all(criterion_met(player, c) for c in quest.criteria):
            quest = replace(quest, is_completed=True)
            changed = True
            logger.info("quest completed: %s (+%d)", quest.name, quest.bonus_points)
        quests.append(quest)
    if not changed:
        return player
    return player._copy_with(quests=tuple(quests))
