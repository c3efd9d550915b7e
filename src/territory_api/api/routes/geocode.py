"""Address geocoding endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...errors import TerritoryAppError
from ...services.geocoding import NominatimGeocoder
from ..dependencies import get_geocoder
from ..errors import to_http_exception
from ...schemas.geocode import GeocodeResponse

router = APIRouter(tags=["geocoding"])


@router.get("/geocode", response_model=GeocodeResponse)
def geocode(
    q: str = Query(default="", description="Free-text address"),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
) -> GeocodeResponse:
    """Best-effort lookup of coordinates for an address. Never used for assignment on its own."""
    try:
        result = geocoder.geocode(q)
    except TerritoryAppError as exc:
        raise to_http_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return GeocodeResponse(
        found=result.found,
        lat=result.lat,
        lng=result.lng,
        display_name=result.display_name,
    )
