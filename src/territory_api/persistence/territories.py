"""Territory records in Supabase.

Geometry is stored as longitude-first GeoJSON in the ``geojson`` column; a
database trigger keeps the PostGIS ``geom`` column in sync.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import PersistenceError
from ..models.domain import Territory
from ..services.geometry import to_editable
from .database import execute, require_client, rows

logger = logging.getLogger(__name__)

TERRITORIES_TABLE = "territories"
TERRITORY_COLUMNS = "id,name,partner_id,priority,geojson"


def _row_to_territory(row: dict[str, Any]) -> Territory:
    territory_id = str(row["id"])
    geojson = row.get("geojson")
    return Territory(
        id=territory_id,
        partner_id=str(row.get("partner_id")),
        name=row.get("name"),
        priority=int(row.get("priority") or 0),
        geojson=geojson,
        polygons=to_editable(geojson, source=f"territory {territory_id}"),
    )


def fetch_territories() -> list[Territory]:
    """All territories with geometry, highest priority first."""
    supabase = require_client()
    query = (
        supabase.table(TERRITORIES_TABLE)
        .select(TERRITORY_COLUMNS)
        .order("priority", desc=True)
        .order("id")
    )
    return [_row_to_territory(row) for row in rows(execute(query, "load territories"))]


def fetch_territory(territory_id: str) -> Territory | None:
    supabase = require_client()
    query = supabase.table(TERRITORIES_TABLE).select(TERRITORY_COLUMNS).eq("id", territory_id).limit(1)
    data = rows(execute(query, f"load territory {territory_id}"))
    return _row_to_territory(data[0]) if data else None


def insert_territory(values: dict[str, Any]) -> Territory:
    supabase = require_client()
    data = rows(execute(supabase.table(TERRITORIES_TABLE).insert(values), "create territory"))
    if not data:
        raise PersistenceError("Territory insert returned no row")
    territory = _row_to_territory(data[0])
    logger.info(f"Created territory {territory.id} for partner {territory.partner_id}")
    return territory


def update_territory(territory_id: str, values: dict[str, Any]) -> Territory | None:
    supabase = require_client()
    query = supabase.table(TERRITORIES_TABLE).update(values).eq("id", territory_id)
    data = rows(execute(query, f"update territory {territory_id}"))
    if not data:
        return None
    logger.info(f"Updated territory {territory_id} ({', '.join(sorted(values))})")
    return _row_to_territory(data[0])


def update_priority(territory_id: str, priority: int) -> bool:
    supabase = require_client()
    query = supabase.table(TERRITORIES_TABLE).update({"priority": priority}).eq("id", territory_id)
    data = rows(execute(query, f"update priority of territory {territory_id}"))
    return bool(data)


def delete_territory(territory_id: str) -> bool:
    supabase = require_client()
    query = supabase.table(TERRITORIES_TABLE).delete().eq("id", territory_id)
    data = rows(execute(query, f"delete territory {territory_id}"))
    if data:
        logger.info(f"Deleted territory {territory_id}")
    return bool(data)
