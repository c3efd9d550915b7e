"""Pydantic request/response models for territory and overlap endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

# Latitude-first editable geometry; null coordinates are filtered by the adapter.
EditablePolygons = list[list[list[list[Optional[float]]]]]


class TerritoryPayload(BaseModel):
    partner_id: str = Field(..., description="Owning partner.")
    name: Optional[str] = Field(default=None, description="Display name.")
    priority: int = Field(default=0, description="Higher wins when territories overlap.")
    polygons: Optional[EditablePolygons] = Field(
        default=None,
        description="Polygons as rings of [lat, lng] pairs.",
    )
    geojson: Optional[dict[str, Any]] = Field(
        default=None,
        description="Polygon, MultiPolygon, Feature or FeatureCollection in [lng, lat] order.",
    )

    @model_validator(mode="after")
    def require_single_geometry(self) -> "TerritoryPayload":
        if (self.polygons is None) == (self.geojson is None):
            raise ValueError("Provide exactly one of 'polygons' or 'geojson'.")
        return self


class TerritoryModel(BaseModel):
    id: str
    name: str
    partner_id: str
    partner_name: Optional[str] = None
    partner_active: Optional[bool] = None
    priority: int
    geojson: dict[str, Any]
    polygons: list[list[list[tuple[float, float]]]]


class TerritoryRefModel(BaseModel):
    id: str
    name: str
    partner_id: str
    partner_name: Optional[str] = None
    priority: int


class TerritoryOverlapModel(BaseModel):
    other_id: str
    other_name: str
    other_partner_id: str
    other_partner_name: Optional[str] = None
    other_priority: int
    overlap_area: float


class TerritoryOverlapsResponse(BaseModel):
    territory_id: str
    overlaps: list[TerritoryOverlapModel]
    highlighted_territory_ids: list[str]


class OverlapPairModel(BaseModel):
    t1_id: str
    t1_name: str
    t1_partner_id: str
    t1_partner_name: Optional[str] = None
    t1_priority: int
    t2_id: str
    t2_name: str
    t2_partner_id: str
    t2_partner_name: Optional[str] = None
    t2_priority: int
    overlap_area: float


class OverlapAuditResponse(BaseModel):
    total: int
    items: list[OverlapPairModel]


class PriorityChangeModel(BaseModel):
    territory_id: str
    old_priority: int
    new_priority: int
