"""
Turn Resolver - Turns a card play into an outcome.

resolve_turn() is a pure function of its inputs plus the difficulty,
settings and player alignment. It draws nothing and rolls nothing; all
randomness happens upstream when the dungeon card is drawn.

Steps:
1. Sum card values, zeroing cards of a suit_penalty modifier's suit
2. Fold in the hand combo
3. Adjust the dungeon card (difficulty, virtue, modifier, power floor)
4. Player total = cards + stat bonus + suit bonus
5. Success / margin (auto crit always succeeds with margin 10)
6. Rewards on success
7. Damage on failure (unless blocked)
8. A TurnRecord for history
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import logging

from .action import ActionKind, action_key
from .cards import Card
from .combos import HandCombo, evaluate_hand_combo, apply_combo
from .settings import Difficulty, GameSettings
from .state import EliteMechanic, ModifierKind, NodeModifier, Scoring, TurnRecord, TurnResult

logger = logging.getLogger(__name__)


AUTO_CRIT_MARGIN = 10
EXPLORE_DOUBLE_STEP_MARGIN = 10
EXPLORE_BONUS_MARGIN = 5


@dataclass(frozen=True)
class ResolutionInput:
    """Everything the caller supplies for one resolution."""
    cards: tuple[Card, ...]
    dungeon_card: Card
    kind: ActionKind
    stat_bonus: int = 0
    suit_bonus: int = 0
    location_id: str | None = None
    location_name: str | None = None
    modifier: NodeModifier | None = None
    auto_crit: bool = False
    damage_block: bool = False

    @property
    def key(self) -> str:
        return action_key(self.kind, self.location_id)


@dataclass(frozen=True)
class RewardBundle:
    """Resource deltas granted by a successful resolution."""
    heal: int = 0
    xp: int = 0
    gold: int = 0
    mana: int = 0
    scoring: Scoring = field(default_factory=Scoring)
    location_steps: int = 0


@dataclass(frozen=True)
class Resolution:
    raw_total: int
    card_total: int
    combo: HandCombo | None
    dungeon_value: int
    player_total: int
    success: bool
    margin: int
    rewards: RewardBundle
    damage: int
    damage_blocked: bool
    message: str
    details: str
    modifier_effect: str


def card_total(cards, modifier: NodeModifier | None = None) -> tuple[int, int, HandCombo | None]:
    """
    Return (raw_total, total_after_combo, combo).

    Penalized suits contribute 0 but still count toward the combo.
    """
    raw = 0
    for card in cards:
        if modifier is not None and modifier.penalizes(card.suit):
            continue
        raw += card.value
    combo = evaluate_hand_combo(cards)
    return raw, apply_combo(raw, combo), combo


def effective_dungeon_value(
    base_value: int,
    difficulty: Difficulty,
    alignment: int,
    settings: GameSettings,
    modifier: NodeModifier | None = None,
) -> tuple[int, str]:
    """Return (effective value, description of what changed it)."""
    notes = []
    value = difficulty.adjust(base_value)
    if difficulty is Difficulty.EASY:
        notes.append("Easy -2")
    elif difficulty is Difficulty.HARD:
        notes.append("Hard +2")

    # Virtue makes the world harder; the soul bonus on success pays it back.
    if alignment >= settings.good_threshold:
        value += 1
        notes.append("Virtue +1")

    if modifier is not None:
        if modifier.adds_difficulty:
            value += modifier.value
            notes.append(f"{modifier.name} +{modifier.value}")
        if modifier.kind is ModifierKind.ELITE_MECHANIC and modifier.elite is EliteMechanic.POWER_FLOOR:
            if value < modifier.floor:
                value = modifier.floor
                notes.append(f"{modifier.name} floor {modifier.floor}")
        if modifier.kind is ModifierKind.SUIT_PENALTY and modifier.target_suit is not None:
            notes.append(f"{modifier.name} penalty")

    return value, ", ".join(notes)


def failure_damage(dungeon_value: int, player_total: int, card_count: int) -> int:
    return max(1, (dungeon_value - player_total) + card_count)


def compute_rewards(kind: ActionKind, margin: int, suit_bonus: int, alignment: int,
                    settings: GameSettings) -> tuple[RewardBundle, str, str]:
    """Return (rewards, message, details) for a successful resolution."""
    suit_extra = 1 if suit_bonus > 0 else 0
    critical = 0

    if kind is ActionKind.REST:
        critical = margin // 5
        heal = 2 + critical + suit_extra
        rewards = RewardBundle(heal=heal, scoring=Scoring(soul=1))
        message, details = f"Restored {heal} Health!", f"+{heal} HP"
    elif kind is ActionKind.TRAIN:
        critical = margin // 8
        xp = 1 + critical + suit_extra
        rewards = RewardBundle(xp=xp, scoring=Scoring(champion=1))
        message, details = f"Gained {xp} XP!", f"+{xp} XP"
    elif kind is ActionKind.LOOT:
        critical = margin // 4
        gold = 1 + critical + suit_extra
        rewards = RewardBundle(gold=gold, scoring=Scoring(fortune=1))
        message, details = f"Found {gold} Gold!", f"+{gold} Gold"
    elif kind is ActionKind.STUDY:
        critical = margin // 4
        mana = 1 + critical + suit_extra
        rewards = RewardBundle(mana=mana, scoring=Scoring(soul=1))
        message, details = f"Gained {mana} Mana!", f"+{mana} Mana"
    elif kind is ActionKind.EXPLORE:
        scoring = Scoring(explore=1, champion=1)
        message, details = "Explored Location!", "Location Progress"
        if margin >= EXPLORE_DOUBLE_STEP_MARGIN:
            rewards = RewardBundle(xp=1, scoring=scoring, location_steps=2)
            message += " Found +1 XP! Double move!"
            details += ", +1 XP, Double Move"
        elif margin >= EXPLORE_BONUS_MARGIN:
            rewards = RewardBundle(gold=1, scoring=scoring, location_steps=1)
            message += " Found +1 Gold!"
            details += ", +1 Gold"
        else:
            rewards = RewardBundle(scoring=scoring, location_steps=1)
    else:
        raise ValueError(f"Unhandled action kind: {kind}")

    if critical > 0:
        message += f" (+{critical} Critical)"
    if suit_bonus > 0:
        message += " (Suit Match!)"

    if alignment >= settings.good_threshold:
        rewards = replace(rewards, scoring=rewards.scoring.add(Scoring(soul=1)))
        details += ", +1 Soul"

    return rewards, message, details


def resolve_turn(
    inputs: ResolutionInput,
    difficulty: Difficulty,
    alignment: int,
    settings: GameSettings,
) -> Resolution:
    """Resolve one card play. Deterministic for identical inputs."""
    modifier = inputs.modifier
    raw, total_after_combo, combo = card_total(inputs.cards, modifier)
    dungeon_value, modifier_effect = effective_dungeon_value(
        inputs.dungeon_card.value, difficulty, alignment, settings, modifier,
    )
    if combo is not None:
        modifier_effect = ", ".join(filter(None, [modifier_effect, combo.name]))

    player_total = total_after_combo + inputs.stat_bonus + inputs.suit_bonus

    success = inputs.auto_crit or player_total >= dungeon_value
    if inputs.auto_crit:
        margin = AUTO_CRIT_MARGIN
    else:
        margin = max(0, player_total - dungeon_value)

    damage = 0
    damage_blocked = False
    if success:
        rewards, message, details = compute_rewards(
            inputs.kind, margin, inputs.suit_bonus, alignment, settings,
        )
        if inputs.auto_crit:
            message = "CRITICAL! " + message
    else:
        rewards = RewardBundle()
        if inputs.damage_block:
            damage_blocked = True
            message = "FAILED! The blow was blocked."
            details = "Blocked"
        else:
            damage = failure_damage(dungeon_value, player_total, len(inputs.cards))
            if modifier is not None and modifier.doubles_damage:
                damage *= 2
            message = f"FAILED! Took {damage} Damage."
            details = f"Took {damage} Dmg"

    logger.debug(
        "resolved %s: player %d vs dungeon %d -> %s (margin %d, damage %d)",
        inputs.key, player_total, dungeon_value,
        "success" if success else "failure", margin, damage,
    )

    return Resolution(
        raw_total=raw,
        card_total=total_after_combo,
        combo=combo,
        dungeon_value=dungeon_value,
        player_total=player_total,
        success=success,
        margin=margin,
        rewards=rewards,
        damage=damage,
        damage_blocked=damage_blocked,
        message=message,
        details=details,
        modifier_effect=modifier_effect,
    )


def action_label(inputs: ResolutionInput) -> str:
    if inputs.kind is ActionKind.EXPLORE:
        return f"Explore {inputs.location_name or inputs.location_id}"
    return inputs.kind.value.upper()


def build_turn_result(inputs: ResolutionInput, resolution: Resolution, round_number: int,
                      turn_number: int) -> TurnResult:
    """Package a resolution as the pending TurnResult with its history record."""
    record = TurnRecord(
        round=round_number,
        turn=turn_number,
        action_name=action_label(inputs),
        player_total=resolution.player_total,
        dungeon_total=resolution.dungeon_value,
        success=resolution.success,
        details=resolution.details,
        card_count=len(inputs.cards),
    )
    return TurnResult(
        player_cards=inputs.cards,
        dungeon_card=inputs.dungeon_card.with_value(resolution.dungeon_value),
        success=resolution.success,
        margin=resolution.margin,
        damage=resolution.damage,
        message=resolution.message,
        stat_bonus=inputs.stat_bonus,
        suit_bonus=inputs.suit_bonus,
        card_total=resolution.card_total,
        pending_record=record,
        action_key=inputs.key,
        combo=resolution.combo,
        damage_blocked=resolution.damage_blocked,
        modifier_effect=resolution.modifier_effect,
    )


# =============================================================================
# Fate Rewind
# =============================================================================

def rewind_fate(previous: TurnResult, new_dungeon_card: Card, difficulty: Difficulty) -> TurnResult:
    """
    Re-resolve a pending result against a freshly drawn dungeon card.

    The player's total (combo included) is reused as-is. Only the
    difficulty adjustment is applied to the new card: no virtue penalty,
    no node modifier, no elite doubling, no block.
    """
    dungeon_value = difficulty.adjust(new_dungeon_card.value)
    player_total = previous.player_total
    card_count = len(previous.player_cards)

    success = player_total >= dungeon_value
    margin = max(0, player_total - dungeon_value)
    if success:
        damage = 0
        message = "FATE REWRITTEN: SUCCESS! (Damage prevented)"
        details = "Rewound Fate: Success"
    else:
        damage = failure_damage(dungeon_value, player_total, card_count)
        message = f"FATE RESISTED! Took {damage} Damage."
        details = f"Rewound Fate: Took {damage} Dmg"

    record = replace(
        previous.pending_record,
        dungeon_total=dungeon_value,
        success=success,
        details=details,
    )
    return replace(
        previous,
        dungeon_card=new_dungeon_card.with_value(dungeon_value),
        success=success,
        margin=margin,
        damage=damage,
        damage_blocked=False,
        message=message,
        modifier_effect="Fate Rewound (Active Node Modifiers Cleared)",
        pending_record=record,
        rewound=True,
    )
