"""Territory workflows: snapshot loading, upsert/delete, overlap audit, priority resolution.

Each call fetches a fresh snapshot, runs the pure matcher/overlap/priority
logic over it and persists at most one change. Callers re-query after a
mutation to observe the new state.
"""

from __future__ import annotations

import logging
from typing import Any

from ...errors import CoordinateValidationError, GeometryValidationError, InactivePartnerError, NotFoundError
from ...models.domain import OverlapPair, Partner, PriorityChange, Territory, TerritoryOverlap
from ...persistence.partners import fetch_partner, fetch_partners
from ...persistence.territories import (
    delete_territory as delete_territory_record,
    fetch_territories,
    fetch_territory,
    insert_territory,
    update_priority,
    update_territory,
)
from ...schemas.territories import TerritoryPayload
from ..geometry import clean_editable, ring_count, to_editable, to_persisted
from ..geospatial import validate_coordinates
from .overlaps import all_overlaps, overlaps_for
from .priority import raise_priority_over_overlaps

logger = logging.getLogger(__name__)


def load_snapshot() -> tuple[list[Territory], dict[str, Partner]]:
    """Territories plus a partner lookup, fetched together for one computation."""

    territories = fetch_territories()
    partners = {partner.id: partner for partner in fetch_partners()}
    return territories, partners


def list_territories() -> tuple[list[Territory], dict[str, Partner]]:
    return load_snapshot()


def _geometry_from_payload(payload: TerritoryPayload, source: str) -> dict[str, Any]:
    if payload.geojson is not None:
        polygons = to_editable(payload.geojson, source=source)
    else:
        polygons = clean_editable(payload.polygons or [], source=source)
    if not polygons:
        raise GeometryValidationError(
            "Territory geometry needs at least one ring with 3 or more valid coordinates"
        )
    for polygon in polygons:
        for ring in polygon:
            for lat, lng in ring:
                try:
                    validate_coordinates(lat, lng)
                except CoordinateValidationError as exc:
                    raise GeometryValidationError(f"Territory vertex out of range: {exc}") from exc
    logger.debug(f"Saving {source} with {len(polygons)} polygon(s) and {ring_count(polygons)} ring(s)")
    return to_persisted(polygons, source=source)


def _require_assignable_partner(partner_id: str) -> Partner:
    partner = fetch_partner(partner_id)
    if partner is None:
        raise NotFoundError("Partner", partner_id)
    if not partner.active:
        raise InactivePartnerError(f"Partner '{partner.name}' is inactive and cannot receive territories")
    return partner


def save_territory(territory_id: str | None, payload: TerritoryPayload) -> tuple[Territory, Partner | None]:
    """Create (``territory_id`` None) or update a territory.

    Returns the stored territory together with its owning partner.
    """

    source = f"territory {territory_id or 'draft'}"
    geojson = _geometry_from_payload(payload, source)
    values: dict[str, Any] = {
        "partner_id": payload.partner_id,
        "name": payload.name.strip() if payload.name and payload.name.strip() else None,
        "priority": payload.priority,
        "geojson": geojson,
    }

    if territory_id is None:
        partner = _require_assignable_partner(payload.partner_id)
        return insert_territory(values), partner

    existing = fetch_territory(territory_id)
    if existing is None:
        raise NotFoundError("Territory", territory_id)
    if existing.partner_id != payload.partner_id:
        partner = _require_assignable_partner(payload.partner_id)
    else:
        partner = fetch_partner(payload.partner_id)

    updated = update_territory(territory_id, values)
    if updated is None:
        raise NotFoundError("Territory", territory_id)
    return updated, partner


def delete_territory(territory_id: str) -> None:
    if not delete_territory_record(territory_id):
        raise NotFoundError("Territory", territory_id)


def overlaps_for_territory(territory_id: str) -> list[TerritoryOverlap]:
    territories, partners = load_snapshot()
    return overlaps_for(territory_id, territories, partners)


def overlap_audit() -> list[OverlapPair]:
    territories, partners = load_snapshot()
    pairs = all_overlaps(territories, partners)
    logger.info(f"Overlap audit found {len(pairs)} overlapping pair(s) across {len(territories)} territories")
    return pairs


def resolve_overlap_by_raising_priority(territory_id: str) -> PriorityChange:
    territories = fetch_territories()
    if not any(territory.id == territory_id for territory in territories):
        raise NotFoundError("Territory", territory_id)

    change = raise_priority_over_overlaps(territory_id, territories)
    if change.changed:
        if not update_priority(territory_id, change.new_priority):
            raise NotFoundError("Territory", territory_id)
        logger.info(
            f"Raised priority of territory {territory_id} from {change.old_priority} to {change.new_priority}"
        )
    else:
        logger.info(f"Territory {territory_id} already outranks its overlaps (priority {change.old_priority})")
    return change
