"""API routes for partner management."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import TerritoryAppError
from ...models.domain import Partner
from ...schemas.partners import PartnerModel, PartnerOption, PartnerPayload
from ...services import partners as partner_service
from ..dependencies import require_admin
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/partners", tags=["partners"])


def _to_model(partner: Partner) -> PartnerModel:
    return PartnerModel.model_validate(asdict(partner))


@router.get("", response_model=list[PartnerModel])
def list_partners() -> list[PartnerModel]:
    try:
        return [_to_model(partner) for partner in partner_service.list_partners()]
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc


@router.get("/active", response_model=list[PartnerOption])
def list_active_partners() -> list[PartnerOption]:
    """Partners eligible for new territories, by name."""
    try:
        return [PartnerOption(id=p.id, name=p.name) for p in partner_service.list_active_partners()]
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=PartnerModel, status_code=status.HTTP_201_CREATED)
def create_partner(payload: PartnerPayload, _role=Depends(require_admin)) -> PartnerModel:
    try:
        return _to_model(partner_service.create_partner(payload))
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error creating partner: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create partner: {exc}",
        ) from exc


@router.put("/{partner_id}", response_model=PartnerModel)
def update_partner(partner_id: str, payload: PartnerPayload, _role=Depends(require_admin)) -> PartnerModel:
    try:
        return _to_model(partner_service.update_partner(partner_id, payload))
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error updating partner {partner_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update partner: {exc}",
        ) from exc


@router.delete("/{partner_id}", status_code=status.HTTP_200_OK)
def delete_partner(partner_id: str, _role=Depends(require_admin)) -> dict:
    try:
        partner_service.delete_partner(partner_id)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error deleting partner {partner_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete partner: {exc}",
        ) from exc
    return {"success": True, "partner_id": partner_id}
