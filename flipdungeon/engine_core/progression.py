"""
Location Progression - Cursor advancement, branching, and completion.

Locations use an arena model: encounters are only ever appended, and a
route of arena indices gives the path. A branch is taken by appending the
chosen path to the arena and splicing its indices into the route right
after the cursor, so positions already visited never move.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .cards import Card, SuitColor
from .state import AdventureLocation, Branch, Encounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressOutcome:
    """What happened to a location after a successful explore."""
    location: AdventureLocation
    steps: int
    branch_taken: SuitColor | None = None
    cleared: bool = False  # True only on the explore that cleared it


def branch_path(branch: Branch, color: SuitColor) -> tuple[Encounter, ...]:
    return branch.red if color is SuitColor.RED else branch.black


def take_branch(location: AdventureLocation, color: SuitColor) -> AdventureLocation:
    """
    Splice the path for `color` into the route after the current encounter.

    Returns the location unchanged if there is no branch here.
    """
    encounter = location.current_encounter
    if encounter is None or encounter.branch is None:
        return location

    path = branch_path(encounter.branch, color)
    start = len(location.encounters)
    new_indices = tuple(range(start, start + len(path)))
    cursor = location.current_encounter_index
    route = location.route[: cursor + 1] + new_indices + location.route[cursor + 1:]

    return location._copy_with(
        encounters=location.encounters + tuple(path),
        route=route,
    )


def advance_location(
    location: AdventureLocation,
    steps: int,
    first_card: Card | None = None,
) -> ProgressOutcome:
    """
    Move the cursor forward after a successful explore.

    If the current encounter branches and a card was played, the colour of
    the first card picks the path before moving. A cleared location is
    returned untouched.
    """
    if location.is_cleared or steps <= 0:
        return ProgressOutcome(location=location, steps=0)

    branch_taken = None
    encounter = location.current_encounter
    if encounter.branch is not None and first_card is not None:
        branch_taken = first_card.color
        location = take_branch(location, branch_taken)
        logger.debug("%s: took the %s path", location.location_id, branch_taken.value)

    new_index = min(location.current_encounter_index + steps, location.length)
    location = location._copy_with(current_encounter_index=new_index)
    cleared = location.is_cleared
    if cleared:
        logger.info("location %s cleared", location.location_id)

    return ProgressOutcome(
        location=location,
        steps=steps,
        branch_taken=branch_taken,
        cleared=cleared,
    )
