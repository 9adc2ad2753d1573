"""
Tests for location progression and branching.
"""

import random

from ..engine_core.cards import Suit, SuitColor
from ..engine_core.modifiers import POWER_FLOOR, reroll_modifiers
from ..engine_core.progression import advance_location, take_branch
from ..engine_core.state import Branch, EliteMechanic, Encounter, ModifierKind, NodeModifier
from ..games.flip_dungeon import default_locations, generate_random_location
from .conftest import make_card, make_location


def forked_location():
    branch = Branch(
        text="Red or Black",
        red=(Encounter(encounter_id="f-1-red-0", name="Burning Road"),),
        black=(
            Encounter(encounter_id="f-1-black-0", name="Shadowed Trail"),
            Encounter(encounter_id="f-1-black-1", name="Quiet Hollow"),
        ),
    )
    encounters = [
        Encounter(encounter_id="f-0", name="Gate"),
        Encounter(encounter_id="f-1", name="Crossroads", branch=branch),
        Encounter(encounter_id="f-2", name="Hall"),
        Encounter(encounter_id="f-3", name="Boss: Throne"),
    ]
    return make_location("f", encounters=encounters)


class TestAdvance:
    """Tests for cursor movement and clearing."""

    def test_single_step(self):
        outcome = advance_location(make_location(length=3), 1)
        assert outcome.location.current_encounter_index == 1
        assert not outcome.cleared

    def test_overshoot_clamps_and_clears_once(self):
        location = make_location(length=4)._copy_with(current_encounter_index=3)
        outcome = advance_location(location, 2)
        assert outcome.location.current_encounter_index == 4
        assert outcome.location.is_cleared
        assert outcome.cleared

        again = advance_location(outcome.location, 1)
        assert not again.cleared
        assert again.location is outcome.location
        assert again.location.current_encounter_index == 4

    def test_cleared_location_has_no_current_encounter(self):
        location = make_location(length=2)._copy_with(current_encounter_index=2)
        assert location.current_encounter is None
        assert location.active_modifier is None

    def test_input_location_is_untouched(self):
        location = make_location(length=3)
        advance_location(location, 1)
        assert location.current_encounter_index == 0


class TestBranching:
    """Tests for splicing a branch path into the route."""

    def test_red_path(self):
        location = forked_location()._copy_with(current_encounter_index=1)
        taken = take_branch(location, SuitColor.RED)
        assert [e.encounter_id for e in taken.path] == ["f-0", "f-1", "f-1-red-0", "f-2", "f-3"]
        assert taken.length == 5

    def test_black_path(self):
        location = forked_location()._copy_with(current_encounter_index=1)
        taken = take_branch(location, SuitColor.BLACK)
        assert [e.encounter_id for e in taken.path] == [
            "f-0", "f-1", "f-1-black-0", "f-1-black-1", "f-2", "f-3",
        ]

    def test_visited_positions_are_stable(self):
        location = forked_location()._copy_with(current_encounter_index=1)
        taken = take_branch(location, SuitColor.BLACK)
        assert taken.encounters[:4] == location.encounters
        assert taken.route[:2] == location.route[:2]

    def test_first_card_color_picks_path(self):
        location = forked_location()._copy_with(current_encounter_index=1)
        outcome = advance_location(location, 1, make_card("3", Suit.HEARTS))
        assert outcome.branch_taken is SuitColor.RED
        assert outcome.location.current_encounter.name == "Burning Road"

        outcome = advance_location(location, 1, make_card("3", Suit.SPADES))
        assert outcome.branch_taken is SuitColor.BLACK
        assert outcome.location.current_encounter.name == "Shadowed Trail"

    def test_no_branch_without_fork(self):
        location = forked_location()
        outcome = advance_location(location, 1, make_card("3", Suit.HEARTS))
        assert outcome.branch_taken is None
        assert outcome.location.length == 4


class TestGeneratedLocations:
    """Tests for the default map."""

    def test_default_locations(self):
        locations = default_locations(random.Random(1))
        assert [loc.location_id for loc in locations] == ["forest", "dungeon", "tower", "city"]
        assert [loc.length for loc in locations] == [5, 8, 4, 3]

    def test_last_encounter_is_a_boss(self):
        for loc in default_locations(random.Random(2)):
            last = loc.path[-1]
            assert last.name.startswith("Boss: ")
            assert last.modifier is not None
            assert last.modifier.elite is not None

    def test_long_locations_fork_at_second_encounter(self):
        for loc in default_locations(random.Random(3)):
            forks = [i for i, e in enumerate(loc.path) if e.branch is not None]
            assert forks == ([1] if loc.length >= 4 else [])

    def test_seed_reproduces_map(self):
        assert default_locations(random.Random(4)) == default_locations(random.Random(4))

    def test_random_location_size(self):
        loc = generate_random_location(2, random.Random(5))
        assert 3 <= loc.length <= 6
        assert loc.current_encounter_index == 0


class TestRerollModifiers:
    """Tests for the per-round modifier re-roll."""

    def hostile(self, value=1):
        return NodeModifier(kind=ModifierKind.DIFFICULTY, value=value, name="Hostile Terrain")

    def test_visited_encounters_keep_modifiers(self):
        encounters = [Encounter(encounter_id=f"r-{i}", name=f"Room {i}", modifier=self.hostile()) for i in range(4)]
        loc = make_location("r", encounters=encounters)._copy_with(current_encounter_index=2)
        new = reroll_modifiers(loc, 2, random.Random(1))
        assert new.path[:2] == loc.path[:2]
        assert new.route == loc.route
        assert new.current_encounter_index == 2

    def test_last_position_becomes_a_scaled_boss(self):
        for seed in range(6):
            boss = reroll_modifiers(make_location(length=3), 4, random.Random(seed)).path[-1].modifier
            assert boss.kind is ModifierKind.ELITE_MECHANIC
            if boss.elite is EliteMechanic.DOUBLE_DAMAGE:
                assert boss.value == 6
            else:
                assert boss.value == 5
                assert boss.floor == POWER_FLOOR

    def test_hostile_terrain_scales(self):
        for seed in range(20):
            loc = reroll_modifiers(make_location(length=6), 2, random.Random(seed))
            for position, encounter in enumerate(loc.path[:-1]):
                if encounter.modifier and encounter.modifier.kind is ModifierKind.DIFFICULTY:
                    assert encounter.modifier.value == int(position * 1.5) + 3

    def test_cleared_location_untouched(self):
        loc = make_location(length=2)._copy_with(current_encounter_index=2)
        assert reroll_modifiers(loc, 2, random.Random(1)) is loc

    def test_untaken_branch_untouched(self):
        loc = forked_location()
        new = reroll_modifiers(loc, 2, random.Random(1))
        assert len(new.encounters) == len(loc.encounters)
        assert new.encounters[1].branch == loc.encounters[1].branch

    def test_taken_branch_is_rerolled_by_position(self):
        loc = take_branch(forked_location()._copy_with(current_encounter_index=1), SuitColor.RED)
        new = reroll_modifiers(loc, 2, random.Random(3))
        assert [e.encounter_id for e in new.path] == [e.encounter_id for e in loc.path]
        assert new.path[0] == loc.path[0]
        assert new.path[-1].modifier.kind is ModifierKind.ELITE_MECHANIC

    def test_seed_reproduces_reroll(self):
        loc = make_location(length=5)
        assert reroll_modifiers(loc, 2, random.Random(9)) == reroll_modifiers(loc, 2, random.Random(9))
