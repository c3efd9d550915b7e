"""Pydantic request/response models for assignment and quote endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class QuoteRequest(BaseModel):
    address: Optional[str] = Field(default=None, description="Free-text address, kept for reference.")
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    @field_validator("address")
    @classmethod
    def blank_address_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class AssignmentModel(BaseModel):
    territory_id: str
    territory_name: str
    partner_id: str
    partner_name: str
    priority: int


class AssignmentResponse(BaseModel):
    lat: float
    lng: float
    assignment: Optional[AssignmentModel] = None
    reason: Optional[str] = None


class CreatedQuoteResponse(BaseModel):
    quote_id: str
    status: Literal["assigned", "unassigned"]
    reason: Optional[str] = None
    territory_id: Optional[str] = None
    territory_name: Optional[str] = None
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None


class QuoteModel(BaseModel):
    id: str
    created_at: Optional[datetime] = None
    address: Optional[str] = None
    lat: float
    lng: float
    status: Literal["assigned", "unassigned"]
    reason: Optional[str] = None
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None
    territory_id: Optional[str] = None
    territory_name: Optional[str] = None


class QuoteListResponse(BaseModel):
    items: list[QuoteModel]
    page: int
    page_size: int
    total: int
    has_next_page: bool
