"""Quote records in Supabase.

Writes go to the ``quotes`` table; reads use the ``v_quotes_list`` view,
which joins partner and territory names.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..errors import PersistenceError
from ..models.domain import Quote
from .database import execute, parse_timestamp, require_client, rows

logger = logging.getLogger(__name__)

QUOTES_TABLE = "quotes"
QUOTES_VIEW = "v_quotes_list"


def _row_to_quote(row: dict[str, Any]) -> Quote:
    return Quote(
        id=str(row["id"]),
        created_at=parse_timestamp(row.get("created_at")),
        address=row.get("address"),
        lat=float(row["lat"]),
        lng=float(row["lng"]),
        status=row.get("status") or "unassigned",
        reason=row.get("reason"),
        partner_id=row.get("assigned_partner_id"),
        partner_name=row.get("partner_name"),
        territory_id=row.get("territory_id"),
        territory_name=row.get("territory_name"),
    )


def insert_quote(values: dict[str, Any]) -> dict[str, Any]:
    """Insert a fully resolved quote row and return it as stored."""
    supabase = require_client()
    data = rows(execute(supabase.table(QUOTES_TABLE).insert(values), "create quote"))
    if not data:
        raise PersistenceError("Quote insert returned no row")
    return data[0]


def fetch_quotes(
    *,
    status: str | None = None,
    partner_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Quote], int]:
    """Return one page of quotes (newest first) and the total match count."""
    supabase = require_client()
    query = supabase.table(QUOTES_VIEW).select("*", count="exact").order("created_at", desc=True)

    if status:
        query = query.eq("status", status)
    if partner_id:
        query = query.eq("assigned_partner_id", partner_id)
    if date_from:
        query = query.gte("created_at", f"{date_from.isoformat()}T00:00:00.000Z")
    if date_to:
        query = query.lte("created_at", f"{date_to.isoformat()}T23:59:59.999Z")

    response = execute(query.range(offset, offset + limit - 1), "load quotes")
    quotes = [_row_to_quote(row) for row in rows(response)]
    total = response.count if isinstance(getattr(response, "count", None), int) else offset + len(quotes)
    return quotes, total


def fetch_quote(quote_id: str) -> Quote | None:
    supabase = require_client()
    query = supabase.table(QUOTES_VIEW).select("*").eq("id", quote_id).limit(1)
    data = rows(execute(query, f"load quote {quote_id}"))
    return _row_to_quote(data[0]) if data else None


def delete_quote(quote_id: str) -> bool:
    supabase = require_client()
    data = rows(execute(supabase.table(QUOTES_TABLE).delete().eq("id", quote_id), f"delete quote {quote_id}"))
    if data:
        logger.info(f"Deleted quote {quote_id}")
    return bool(data)
