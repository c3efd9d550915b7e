"""Priority bump that lets a territory outrank everything it overlaps."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import PriorityChange, Territory
from .overlaps import overlaps_for


def raise_priority_over_overlaps(territory_id: str, territories: Sequence[Territory]) -> PriorityChange:
    """Compute the priority ``territory_id`` needs to win every overlap it has.

    The result is one more than the highest overlapping priority. A territory
    that already outranks all of its overlaps, or overlaps nothing, keeps its
    current priority.
    """

    overlaps = overlaps_for(territory_id, territories)
    focal = next(territory for territory in territories if territory.id == territory_id)
    if not overlaps:
        return PriorityChange(territory_id, focal.priority, focal.priority)

    highest = max(overlap.other.priority for overlap in overlaps)
    new_priority = highest + 1 if focal.priority <= highest else focal.priority
    return PriorityChange(territory_id, focal.priority, new_priority)
