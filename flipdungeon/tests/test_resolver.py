"""
Tests for the turn resolver (pure numeric resolution).

Tests:
- Success and margin
- Rewards per action kind
- Failure damage and elite doubling
- Difficulty, virtue and node modifiers
- Auto crit and damage block
- Fate rewind
"""

from ..engine_core.action import ActionKind
from ..engine_core.cards import Suit
from ..engine_core.resolver import (
    ResolutionInput,
    build_turn_result,
    effective_dungeon_value,
    resolve_turn,
    rewind_fate,
)
from ..engine_core.settings import DEFAULT_SETTINGS, Difficulty
from ..engine_core.state import EliteMechanic, ModifierKind, NodeModifier
from .conftest import make_card

H, D, C, S = Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES

BRUTAL = NodeModifier(kind=ModifierKind.ELITE_MECHANIC, value=2, name="Brutal Champion",
                      elite=EliteMechanic.DOUBLE_DAMAGE)
WARDEN = NodeModifier(kind=ModifierKind.ELITE_MECHANIC, value=1, name="Iron Warden",
                      elite=EliteMechanic.POWER_FLOOR, floor=10)


def resolve(cards, dungeon, kind=ActionKind.TRAIN, difficulty=Difficulty.NORMAL, alignment=0, **kwargs):
    inputs = ResolutionInput(cards=tuple(cards), dungeon_card=dungeon, kind=kind, **kwargs)
    return inputs, resolve_turn(inputs, difficulty, alignment, DEFAULT_SETTINGS)


class TestSuccess:
    """Tests for the success check and margin."""

    def test_eight_of_spades_beats_nine(self):
        """8 + stat 2 vs 9 on Normal: success by 1."""
        _, r = resolve([make_card("8", S)], make_card("9", H), stat_bonus=2)
        assert r.player_total == 10
        assert r.dungeon_value == 9
        assert r.success
        assert r.margin == 1

    def test_tie_succeeds(self):
        _, r = resolve([make_card("9", S)], make_card("9", H))
        assert r.success
        assert r.margin == 0

    def test_failure_has_zero_margin(self):
        _, r = resolve([make_card("2", S)], make_card("K", H))
        assert not r.success
        assert r.margin == 0

    def test_deterministic(self):
        cards = [make_card("7", H), make_card("7", D)]
        _, a = resolve(cards, make_card("Q", S), stat_bonus=3, suit_bonus=2)
        _, b = resolve(cards, make_card("Q", S), stat_bonus=3, suit_bonus=2)
        assert a == b

    def test_combo_is_applied_before_bonuses(self):
        cards = [make_card("7", H), make_card("7", D)]
        _, r = resolve(cards, make_card("K", S), stat_bonus=1)
        assert r.raw_total == 14
        assert r.card_total == 21
        assert r.player_total == 22
        assert r.combo.name == "Pair"


class TestRewards:
    """Tests for per-kind rewards."""

    def test_rest_heal_with_margin_and_suit(self):
        """Margin 12 with a suit bonus heals 2 + 2 + 1."""
        _, r = resolve([make_card("K", H)], make_card("2", C), kind=ActionKind.REST, suit_bonus=2, stat_bonus=2)
        assert r.margin == 12
        assert r.rewards.heal == 5
        assert r.rewards.scoring.soul == 1

    def test_train_xp(self):
        _, r = resolve([make_card("K", C)], make_card("2", H), kind=ActionKind.TRAIN)
        assert r.margin == 8
        assert r.rewards.xp == 2
        assert r.rewards.scoring.champion == 1

    def test_loot_gold(self):
        _, r = resolve([make_card("K", C)], make_card("2", H), kind=ActionKind.LOOT)
        assert r.rewards.gold == 1 + 8 // 4
        assert r.rewards.scoring.fortune == 1

    def test_study_mana(self):
        _, r = resolve([make_card("5", C)], make_card("5", H), kind=ActionKind.STUDY)
        assert r.rewards.mana == 1
        assert r.rewards.scoring.soul == 1

    def test_explore_single_step(self):
        _, r = resolve([make_card("5", C)], make_card("3", H), kind=ActionKind.EXPLORE, location_id="crypt")
        assert r.rewards.location_steps == 1
        assert r.rewards.gold == 0
        assert r.rewards.scoring.explore == 1
        assert r.rewards.scoring.champion == 1

    def test_explore_bonus_gold(self):
        _, r = resolve([make_card("9", C)], make_card("3", H), kind=ActionKind.EXPLORE, location_id="crypt")
        assert r.margin == 6
        assert r.rewards.location_steps == 1
        assert r.rewards.gold == 1

    def test_explore_double_step(self):
        _, r = resolve([make_card("K", C)], make_card("A", H), kind=ActionKind.EXPLORE,
                       location_id="crypt", stat_bonus=1)
        assert r.margin == 10
        assert r.rewards.location_steps == 2
        assert r.rewards.xp == 1

    def test_virtue_adds_soul_point(self):
        _, r = resolve([make_card("K", C)], make_card("2", H), kind=ActionKind.TRAIN, alignment=5)
        assert r.rewards.scoring.soul == 1
        assert r.rewards.scoring.champion == 1


class TestDamage:
    """Tests for failure damage."""

    def test_damage_formula(self):
        """Dungeon 15 vs total 9 with 2 cards: 6 + 2 = 8."""
        _, r = resolve([make_card("4", S), make_card("5", H)], make_card("K", D), difficulty=Difficulty.HARD,
                       modifier=NodeModifier(kind=ModifierKind.DIFFICULTY, value=3, name="Hostile Terrain"))
        assert r.dungeon_value == 15
        assert r.player_total == 9
        assert r.damage == 8

    def test_double_damage_elite(self):
        _, r = resolve([make_card("4", S), make_card("5", H)], make_card("K", D),
                       modifier=BRUTAL, stat_bonus=-1, difficulty=Difficulty.HARD)
        # 10 + 2 hard + 2 brutal = 14 vs 8, 2 cards: (6 + 2) * 2
        assert r.dungeon_value == 14
        assert r.damage == 16

    def test_narrow_loss_still_costs_card_count(self):
        _, r = resolve([make_card("9", S)], make_card("10", H))
        assert r.damage == 2

    def test_no_damage_on_success(self):
        _, r = resolve([make_card("K", S)], make_card("2", H))
        assert r.damage == 0


class TestDungeonValue:
    """Tests for dungeon value adjustments."""

    def test_difficulty_shift(self):
        assert effective_dungeon_value(9, Difficulty.EASY, 0, DEFAULT_SETTINGS)[0] == 7
        assert effective_dungeon_value(9, Difficulty.NORMAL, 0, DEFAULT_SETTINGS)[0] == 9
        assert effective_dungeon_value(9, Difficulty.HARD, 0, DEFAULT_SETTINGS)[0] == 11

    def test_easy_floors_at_one(self):
        assert effective_dungeon_value(2, Difficulty.EASY, 0, DEFAULT_SETTINGS)[0] == 1

    def test_virtue_penalty(self):
        assert effective_dungeon_value(9, Difficulty.NORMAL, 5, DEFAULT_SETTINGS)[0] == 10
        assert effective_dungeon_value(9, Difficulty.NORMAL, 4, DEFAULT_SETTINGS)[0] == 9

    def test_power_floor(self):
        value, effect = effective_dungeon_value(3, Difficulty.NORMAL, 0, DEFAULT_SETTINGS, WARDEN)
        assert value == 10
        assert "floor" in effect

    def test_power_floor_above_floor(self):
        value, _ = effective_dungeon_value(10, Difficulty.NORMAL, 0, DEFAULT_SETTINGS, WARDEN)
        assert value == 11

    def test_suit_penalty_zeroes_cards(self):
        ban = NodeModifier(kind=ModifierKind.SUIT_PENALTY, name="Hearts Ban", target_suit=H)
        _, r = resolve([make_card("K", H), make_card("5", S)], make_card("5", D), modifier=ban)
        assert r.raw_total == 5
        assert r.success


class TestEffects:
    """Tests for one-shot effect flags."""

    def test_auto_crit_always_succeeds(self):
        _, r = resolve([make_card("A", S)], make_card("K", H), kind=ActionKind.REST, auto_crit=True)
        assert r.success
        assert r.margin == 10
        assert r.rewards.heal == 4
        assert r.message.startswith("CRITICAL!")

    def test_damage_block(self):
        _, r = resolve([make_card("A", S)], make_card("K", H), damage_block=True)
        assert not r.success
        assert r.damage == 0
        assert r.damage_blocked

    def test_block_unused_on_success(self):
        _, r = resolve([make_card("K", S)], make_card("2", H), damage_block=True)
        assert r.success
        assert not r.damage_blocked


class TestRewind:
    """Tests for re-resolving against a new dungeon card."""

    def failed_result(self, modifier=None):
        inputs, r = resolve([make_card("4", S), make_card("5", H)], make_card("K", D), modifier=modifier)
        return build_turn_result(inputs, r, 1, 2)

    def test_rewind_to_success(self):
        previous = self.failed_result()
        result = rewind_fate(previous, make_card("6", C), Difficulty.NORMAL)
        assert result.success
        assert result.damage == 0
        assert result.margin == 3
        assert result.rewound
        assert result.pending_record.success
        assert result.pending_record.dungeon_total == 6

    def test_rewind_to_failure(self):
        previous = self.failed_result()
        result = rewind_fate(previous, make_card("Q", C), Difficulty.HARD)
        assert not result.success
        assert result.damage == (12 - 9) + 2
        assert result.rewound

    def test_rewind_ignores_node_modifier(self):
        previous = self.failed_result(modifier=BRUTAL)
        result = rewind_fate(previous, make_card("K", C), Difficulty.NORMAL)
        assert result.dungeon_card.value == 10
        assert result.damage == (10 - 9) + 2

    def test_player_total_is_reused(self):
        previous = self.failed_result()
        result = rewind_fate(previous, make_card("2", C), Difficulty.NORMAL)
        assert result.player_total == previous.player_total
        assert result.player_cards == previous.player_cards
