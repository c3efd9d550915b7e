"""Areal overlap detection between territories."""

from __future__ import annotations

from typing import Mapping, Sequence

from shapely import STRtree
from shapely.geometry.base import BaseGeometry

from ...errors import NotFoundError
from ...models.domain import OverlapPair, Partner, Territory, TerritoryOverlap, TerritoryRef
from ..geospatial import area_km2
from .matcher import territory_geometry


def territory_ref(territory: Territory, partners: Mapping[str, Partner] | None = None) -> TerritoryRef:
    partner = (partners or {}).get(territory.partner_id)
    return TerritoryRef(
        id=territory.id,
        name=territory.display_name,
        partner_id=territory.partner_id,
        partner_name=partner.name if partner else None,
        priority=territory.priority,
    )


def overlap_area(first: BaseGeometry, second: BaseGeometry) -> float:
    """Overlap in km²; 0.0 when the shapes are disjoint or only touch."""

    intersection = first.intersection(second)
    if intersection.is_empty or intersection.area <= 0.0:
        return 0.0
    return area_km2(intersection)


def _shapes(territories: Sequence[Territory]) -> list[tuple[Territory, BaseGeometry]]:
    shapes = []
    for territory in territories:
        geometry = territory_geometry(territory)
        if not geometry.is_empty:
            shapes.append((territory, geometry))
    return shapes


def overlaps_for(
    territory_id: str,
    territories: Sequence[Territory],
    partners: Mapping[str, Partner] | None = None,
) -> list[TerritoryOverlap]:
    """Every other territory whose area intersects the given one, largest overlap first."""

    focal = next((territory for territory in territories if territory.id == territory_id), None)
    if focal is None:
        raise NotFoundError("Territory", territory_id)

    focal_geometry = territory_geometry(focal)
    if focal_geometry.is_empty:
        return []

    others = _shapes([territory for territory in territories if territory.id != territory_id])
    if not others:
        return []

    tree = STRtree([geometry for _, geometry in others])
    overlaps: list[TerritoryOverlap] = []
    for index in tree.query(focal_geometry, predicate="intersects"):
        other, geometry = others[int(index)]
        area = overlap_area(focal_geometry, geometry)
        if area > 0.0:
            overlaps.append(
                TerritoryOverlap(
                    territory_id=territory_id,
                    other=territory_ref(other, partners),
                    overlap_area=area,
                )
            )
    overlaps.sort(key=lambda item: (-item.overlap_area, item.other.id))
    return overlaps


def all_overlaps(
    territories: Sequence[Territory],
    partners: Mapping[str, Partner] | None = None,
) -> list[OverlapPair]:
    """Every overlapping pair in the set, largest overlap first.

    Each pair appears once, with the lower territory id first.
    """

    shapes = sorted(_shapes(territories), key=lambda item: str(item[0].id))
    if len(shapes) < 2:
        return []

    tree = STRtree([geometry for _, geometry in shapes])
    pairs: list[OverlapPair] = []
    for position, (territory, geometry) in enumerate(shapes):
        for index in tree.query(geometry, predicate="intersects"):
            other_position = int(index)
            if other_position <= position:
                continue
            other, other_geometry = shapes[other_position]
            area = overlap_area(geometry, other_geometry)
            if area > 0.0:
                pairs.append(
                    OverlapPair(
                        first=territory_ref(territory, partners),
                        second=territory_ref(other, partners),
                        overlap_area=area,
                    )
                )
    pairs.sort(key=lambda pair: (-pair.overlap_area, pair.first.id, pair.second.id))
    return pairs
