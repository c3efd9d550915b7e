"""Point-in-territory matching with priority tie-breaking."""

from __future__ import annotations

from typing import Mapping, Sequence

from shapely.geometry import Point
from shapely.geometry.base import BaseGeometry

from ...models.domain import (
    REASON_NO_ACTIVE_PARTNER,
    REASON_NO_TERRITORY_MATCH,
    AssignmentResult,
    MatchOutcome,
    Partner,
    Territory,
)
from ..geometry import to_editable, to_shapely
from ..geospatial import validate_coordinates


def territory_geometry(territory: Territory) -> BaseGeometry:
    """Shapely geometry (lon/lat axes) for a territory."""

    polygons = territory.polygons or to_editable(territory.geojson, source=f"territory {territory.id}")
    return to_shapely(polygons, source=f"territory {territory.id}")


def winner_sort_key(territory: Territory) -> tuple[int, str]:
    """Highest priority first; equal priorities fall back to ascending territory id."""

    return (-territory.priority, str(territory.id))


def resolve_point(
    lat: float,
    lng: float,
    territories: Sequence[Territory],
    partners: Mapping[str, Partner],
) -> MatchOutcome:
    """Pick the territory that owns a point, or explain why none does.

    Containment includes the boundary. Territories whose partner is missing or
    inactive never win.
    """

    lat, lng = validate_coordinates(lat, lng)
    point = Point(lng, lat)

    containing = [territory for territory in territories if territory_geometry(territory).covers(point)]
    if not containing:
        return MatchOutcome(assignment=None, reason=REASON_NO_TERRITORY_MATCH)

    eligible = [
        territory
        for territory in containing
        if (partner := partners.get(territory.partner_id)) is not None and partner.active
    ]
    if not eligible:
        return MatchOutcome(assignment=None, reason=REASON_NO_ACTIVE_PARTNER, candidates=len(containing))

    winner = min(eligible, key=winner_sort_key)
    partner = partners[winner.partner_id]
    return MatchOutcome(
        assignment=AssignmentResult(
            territory_id=winner.id,
            territory_name=winner.display_name,
            partner_id=partner.id,
            partner_name=partner.name,
            priority=winner.priority,
        ),
        candidates=len(eligible),
    )


def match_point(
    lat: float,
    lng: float,
    territories: Sequence[Territory],
    partners: Mapping[str, Partner],
) -> AssignmentResult | None:
    return resolve_point(lat, lng, territories, partners).assignment
