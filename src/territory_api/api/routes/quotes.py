"""API routes for point assignment and quotes."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...config import settings
from ...errors import TerritoryAppError
from ...schemas.quotes import (
    AssignmentModel,
    AssignmentResponse,
    CreatedQuoteResponse,
    QuoteListResponse,
    QuoteModel,
    QuoteRequest,
)
from ...services.quotes import service as quote_service
from ..dependencies import require_admin, require_staff
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quotes"])


@router.get("/assignments", response_model=AssignmentResponse)
def find_assignment(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lng: float = Query(..., ge=-180.0, le=180.0),
) -> AssignmentResponse:
    """Which partner would receive a quote at this point. No match is a normal, empty result."""
    try:
        outcome = quote_service.find_assignment(lat, lng)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error matching point ({lat}, {lng}): {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to find assignment: {exc}",
        ) from exc

    assignment = AssignmentModel.model_validate(asdict(outcome.assignment)) if outcome.assignment else None
    return AssignmentResponse(lat=lat, lng=lng, assignment=assignment, reason=outcome.reason)


@router.post("/quotes", response_model=CreatedQuoteResponse, status_code=status.HTTP_201_CREATED)
def create_quote(payload: QuoteRequest, _role=Depends(require_staff)) -> CreatedQuoteResponse:
    try:
        created = quote_service.create_and_assign_quote(payload.address, payload.lat, payload.lng)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error creating quote: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create quote: {exc}",
        ) from exc
    return CreatedQuoteResponse.model_validate(asdict(created))


@router.get("/quotes", response_model=QuoteListResponse)
def list_quotes(
    status_filter: Literal["assigned", "unassigned"] | None = Query(default=None, alias="status"),
    partner_id: str | None = Query(default=None, description="Assigned partner"),
    date_from: date | None = Query(default=None, description="Created on or after (UTC date)"),
    date_to: date | None = Query(default=None, description="Created on or before (UTC date)"),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
) -> QuoteListResponse:
    size = min(page_size or settings.quotes_page_size, settings.quotes_max_page_size)
    try:
        result = quote_service.list_quotes(
            status=status_filter,
            partner_id=partner_id,
            date_from=date_from,
            date_to=date_to,
            page=page,
            page_size=size,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc

    return QuoteListResponse(
        items=[QuoteModel.model_validate(asdict(quote)) for quote in result.items],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        has_next_page=result.has_next_page,
    )


@router.get("/quotes/{quote_id}", response_model=QuoteModel)
def get_quote(quote_id: str) -> QuoteModel:
    try:
        return QuoteModel.model_validate(asdict(quote_service.get_quote(quote_id)))
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc


@router.delete("/quotes/{quote_id}", status_code=status.HTTP_200_OK)
def delete_quote(quote_id: str, _role=Depends(require_admin)) -> dict[str, Any]:
    try:
        quote_service.delete_quote(quote_id)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except Exception as exc:
        logger.exception(f"Error deleting quote {quote_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete quote: {exc}",
        ) from exc
    return {"success": True, "quote_id": quote_id}
