"""Liveness and storage diagnostics."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...errors import TerritoryAppError
from ...persistence.database import execute, require_client

router = APIRouter(tags=["health"])

COUNTED_TABLES = ("partners", "territories", "quotes")


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Report whether Supabase is configured and reachable, with row counts per table."""
    try:
        supabase = require_client()
    except TerritoryAppError as exc:
        return {"configured": False, "connected": False, "message": str(exc), "counts": {}}

    counts: dict[str, int] = {}
    try:
        for table in COUNTED_TABLES:
            response = execute(supabase.table(table).select("id", count="exact").limit(1), f"count {table}")
            counts[table] = response.count if isinstance(response.count, int) else len(response.data or [])
    except TerritoryAppError as exc:
        return {"configured": True, "connected": False, "message": str(exc), "counts": counts}

    return {
        "configured": True,
        "connected": True,
        "message": "Database connected. " + ", ".join(f"{count} {table}" for table, count in counts.items()),
        "counts": counts,
    }
