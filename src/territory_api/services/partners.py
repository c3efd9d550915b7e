"""Partner management."""

from __future__ import annotations

from typing import Any

from ..errors import NotFoundError
from ..models.domain import Partner
from ..persistence import partners as partner_store
from ..schemas.partners import PartnerPayload


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _to_record(payload: PartnerPayload) -> dict[str, Any]:
    languages = [code.strip() for code in payload.languages or [] if code and code.strip()]
    return {
        "name": payload.name.strip(),
        "partner_type": _clean(payload.partner_type),
        "languages": languages or None,
        "contact": {
            "name": _clean(payload.contact.name),
            "email": _clean(payload.contact.email),
            "phone": _clean(payload.contact.phone),
        },
        "active": payload.active,
    }


def list_partners() -> list[Partner]:
    return partner_store.fetch_partners()


def list_active_partners() -> list[Partner]:
    return partner_store.fetch_active_partners()


def create_partner(payload: PartnerPayload) -> Partner:
    return partner_store.insert_partner(_to_record(payload))


def update_partner(partner_id: str, payload: PartnerPayload) -> Partner:
    partner = partner_store.update_partner(partner_id, _to_record(payload))
    if partner is None:
        raise NotFoundError("Partner", partner_id)
    return partner


def delete_partner(partner_id: str) -> None:
    if not partner_store.delete_partner(partner_id):
        raise NotFoundError("Partner", partner_id)
