"""Partner records in Supabase."""

from __future__ import annotations

import logging
from typing import Any

from ..errors import PartnerInUseError, PersistenceError
from ..models.domain import Contact, Partner
from .database import FOREIGN_KEY_VIOLATION, execute, parse_timestamp, require_client, rows

logger = logging.getLogger(__name__)

PARTNERS_TABLE = "partners"
PARTNER_COLUMNS = "id,name,partner_type,languages,contact,active,created_at"


def _row_to_partner(row: dict[str, Any]) -> Partner:
    contact = row.get("contact") if isinstance(row.get("contact"), dict) else {}
    languages = row.get("languages")
    return Partner(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        partner_type=row.get("partner_type"),
        languages=list(languages) if isinstance(languages, list) else None,
        contact=Contact(
            name=contact.get("name"),
            email=contact.get("email"),
            phone=contact.get("phone"),
        ),
        # A null flag is treated as active, matching the partners form default
        active=row.get("active") is not False,
        created_at=parse_timestamp(row.get("created_at")),
    )


def fetch_partners() -> list[Partner]:
    """All partners, newest first."""
    supabase = require_client()
    query = supabase.table(PARTNERS_TABLE).select(PARTNER_COLUMNS).order("created_at", desc=True)
    return [_row_to_partner(row) for row in rows(execute(query, "load partners"))]


def fetch_active_partners() -> list[Partner]:
    supabase = require_client()
    query = (
        supabase.table(PARTNERS_TABLE)
        .select(PARTNER_COLUMNS)
        .eq("active", True)
        .order("name")
    )
    return [_row_to_partner(row) for row in rows(execute(query, "load active partners"))]


def fetch_partner(partner_id: str) -> Partner | None:
    supabase = require_client()
    query = supabase.table(PARTNERS_TABLE).select(PARTNER_COLUMNS).eq("id", partner_id).limit(1)
    data = rows(execute(query, f"load partner {partner_id}"))
    return _row_to_partner(data[0]) if data else None


def insert_partner(values: dict[str, Any]) -> Partner:
    supabase = require_client()
    data = rows(execute(supabase.table(PARTNERS_TABLE).insert(values), "create partner"))
    if not data:
        raise PersistenceError("Partner insert returned no row")
    partner = _row_to_partner(data[0])
    logger.info(f"Created partner {partner.id} ({partner.name})")
    return partner


def update_partner(partner_id: str, values: dict[str, Any]) -> Partner | None:
    supabase = require_client()
    query = supabase.table(PARTNERS_TABLE).update(values).eq("id", partner_id)
    data = rows(execute(query, f"update partner {partner_id}"))
    if not data:
        return None
    logger.info(f"Updated partner {partner_id}")
    return _row_to_partner(data[0])


def delete_partner(partner_id: str) -> bool:
    """Delete a partner. Returns False when no row matched."""
    supabase = require_client()
    query = supabase.table(PARTNERS_TABLE).delete().eq("id", partner_id)
    try:
        data = rows(execute(query, f"delete partner {partner_id}"))
    except PersistenceError as exc:
        if exc.code == FOREIGN_KEY_VIOLATION:
            raise PartnerInUseError(
                "Partner still owns territories or quotes; reassign or delete them first"
            ) from exc
        raise
    if data:
        logger.info(f"Deleted partner {partner_id}")
    return bool(data)
