"""Geocoding response model."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class GeocodeResponse(BaseModel):
    ok: bool = True
    found: bool
    lat: Optional[float] = None
    lng: Optional[float] = None
    display_name: Optional[str] = None
