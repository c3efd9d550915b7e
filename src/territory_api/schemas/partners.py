"""Pydantic request/response models for partner endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ContactModel(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class PartnerPayload(BaseModel):
    name: str = Field(..., description="Display name; required.")
    partner_type: Optional[str] = Field(default=None, description="Category tag.")
    languages: Optional[list[str]] = Field(default_factory=lambda: ["en"], description="Supported language codes.")
    contact: ContactModel = Field(default_factory=ContactModel)
    active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()


class PartnerModel(BaseModel):
    id: str
    name: str
    partner_type: Optional[str] = None
    languages: Optional[list[str]] = None
    contact: ContactModel
    active: bool
    created_at: Optional[datetime] = None


class PartnerOption(BaseModel):
    id: str
    name: str
