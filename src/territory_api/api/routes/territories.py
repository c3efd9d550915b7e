"""API routes for territories, overlap audit and priority resolution."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...config import settings
from ...errors import TerritoryAppError
from ...models.domain import OverlapPair, Partner, Territory, TerritoryOverlap
from ...schemas.territories import (
    OverlapAuditResponse,
    OverlapPairModel,
    PriorityChangeModel,
    TerritoryModel,
    TerritoryOverlapModel,
    TerritoryOverlapsResponse,
    TerritoryPayload,
)
from ...services.export import territories_to_feature_collection
from ...services.geometry import to_persisted
from ...services.territories import overlaps_for
from ...services.territories import service as territory_service
from ..dependencies import require_admin
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/territories", tags=["territories"])


def _to_model(territory: Territory, partners: Mapping[str, Partner] | None = None) -> TerritoryModel:
    partner = (partners or {}).get(territory.partner_id)
    return TerritoryModel(
        id=territory.id,
        name=territory.display_name,
        partner_id=territory.partner_id,
        partner_name=partner.name if partner else None,
        partner_active=partner.active if partner else None,
        priority=territory.priority,
        geojson=to_persisted(territory.polygons),
        polygons=territory.polygons,
    )


def _saved_model(saved: tuple[Territory, Partner | None]) -> TerritoryModel:
    territory, partner = saved
    return _to_model(territory, {partner.id: partner} if partner else None)


def _overlap_model(overlap: TerritoryOverlap) -> TerritoryOverlapModel:
    other = overlap.other
    return TerritoryOverlapModel(
        other_id=other.id,
        other_name=other.name,
        other_partner_id=other.partner_id,
        other_partner_name=other.partner_name,
        other_priority=other.priority,
        overlap_area=overlap.overlap_area,
    )


def _pair_model(pair: OverlapPair) -> OverlapPairModel:
    return OverlapPairModel(
        t1_id=pair.first.id,
        t1_name=pair.first.name,
        t1_partner_id=pair.first.partner_id,
        t1_partner_name=pair.first.partner_name,
        t1_priority=pair.first.priority,
        t2_id=pair.second.id,
        t2_name=pair.second.name,
        t2_partner_id=pair.second.partner_id,
        t2_partner_name=pair.second.partner_name,
        t2_priority=pair.second.priority,
        overlap_area=pair.overlap_area,
    )


def _server_error(action: str, exc: Exception) -> HTTPException:
    logger.exception(f"Error while trying to {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {exc}",
    )


@router.get("", response_model=list[TerritoryModel])
def list_territories() -> list[TerritoryModel]:
    """All territories with persisted ([lng, lat]) and editable ([lat, lng]) geometry."""
    try:
        territories, partners = territory_service.list_territories()
        return [_to_model(territory, partners) for territory in territories]
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error("load territories", exc) from exc


@router.get("/geojson", status_code=status.HTTP_200_OK)
def get_territories_geojson(
    highlight: str | None = Query(default=None, description="Territory whose overlaps should be highlighted"),
) -> dict[str, Any]:
    """FeatureCollection for the map, optionally flagging a territory and everything it overlaps."""
    try:
        territories, partners = territory_service.list_territories()
        highlighted: list[str] = []
        if highlight:
            overlaps = overlaps_for(highlight, territories, partners)
            if overlaps:
                highlighted = [highlight, *(overlap.other.id for overlap in overlaps)]
        return territories_to_feature_collection(territories, partners, highlighted)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error("build territory map", exc) from exc


@router.get("/overlaps", response_model=OverlapAuditResponse)
def get_overlap_audit(
    limit: int | None = Query(default=None, ge=1, description="Maximum number of pairs to return"),
) -> OverlapAuditResponse:
    """Every overlapping pair, largest overlap first; ``total`` counts all pairs."""
    try:
        pairs = territory_service.overlap_audit()
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error("audit territory overlaps", exc) from exc

    shown = pairs[: limit or settings.overlap_display_limit]
    return OverlapAuditResponse(total=len(pairs), items=[_pair_model(pair) for pair in shown])


@router.post("", response_model=TerritoryModel, status_code=status.HTTP_201_CREATED)
def create_territory(payload: TerritoryPayload, _role=Depends(require_admin)) -> TerritoryModel:
    try:
        return _saved_model(territory_service.save_territory(None, payload))
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error("create territory", exc) from exc


@router.put("/{territory_id}", response_model=TerritoryModel)
def update_territory(territory_id: str, payload: TerritoryPayload, _role=Depends(require_admin)) -> TerritoryModel:
    try:
        return _saved_model(territory_service.save_territory(territory_id, payload))
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error(f"update territory '{territory_id}'", exc) from exc


@router.delete("/{territory_id}", status_code=status.HTTP_200_OK)
def delete_territory(territory_id: str, _role=Depends(require_admin)) -> dict[str, Any]:
    try:
        territory_service.delete_territory(territory_id)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error(f"delete territory '{territory_id}'", exc) from exc
    return {"success": True, "territory_id": territory_id}


@router.get("/{territory_id}/overlaps", response_model=TerritoryOverlapsResponse)
def get_territory_overlaps(territory_id: str) -> TerritoryOverlapsResponse:
    try:
        overlaps = territory_service.overlaps_for_territory(territory_id)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error(f"compute overlaps for '{territory_id}'", exc) from exc

    highlighted = [territory_id, *(overlap.other.id for overlap in overlaps)] if overlaps else []
    return TerritoryOverlapsResponse(
        territory_id=territory_id,
        overlaps=[_overlap_model(overlap) for overlap in overlaps],
        highlighted_territory_ids=highlighted,
    )


@router.post("/{territory_id}/resolve-overlap", response_model=PriorityChangeModel)
def resolve_overlap(territory_id: str, _role=Depends(require_admin)) -> PriorityChangeModel:
    """Raise the territory's priority above everything it overlaps. Re-query afterwards."""
    try:
        change = territory_service.resolve_overlap_by_raising_priority(territory_id)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        raise _server_error(f"resolve overlap for '{territory_id}'", exc) from exc
    return PriorityChangeModel(
        territory_id=change.territory_id,
        old_priority=change.old_priority,
        new_priority=change.new_priority,
    )
