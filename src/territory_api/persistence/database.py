"""Shared helpers for Supabase-backed persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx
from supabase import Client

from ..db.supabase import get_supabase_client
from ..errors import AuthorizationError, PersistenceError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes surfaced by PostgREST
INSUFFICIENT_PRIVILEGE = "42501"
FOREIGN_KEY_VIOLATION = "23503"


def require_client() -> Client:
    supabase = get_supabase_client()
    if not supabase:
        raise PersistenceError(
            "Database not configured. Set TERRITORY_SUPABASE_URL and TERRITORY_SUPABASE_KEY.",
            unavailable=True,
        )
    return supabase


def translate_error(exc: Exception, action: str) -> Exception:
    """Map a Supabase/PostgREST failure onto the application error taxonomy."""

    message = getattr(exc, "message", None) or str(exc)
    code = getattr(exc, "code", None)
    lowered = message.lower()

    if code == INSUFFICIENT_PRIVILEGE or "row-level security" in lowered or "permission denied" in lowered:
        return AuthorizationError(f"Not allowed to {action}")
    if isinstance(exc, (httpx.TransportError, ConnectionError, OSError)):
        return PersistenceError(f"Cannot reach database while trying to {action}: {message}", unavailable=True)
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in lowered:
        return PersistenceError(message, code=FOREIGN_KEY_VIOLATION)
    return PersistenceError(f"Failed to {action}: {message}", code=code)


def execute(query: Any, action: str) -> Any:
    """Run a prepared query, translating collaborator failures."""

    try:
        return query.execute()
    except Exception as exc:
        logger.warning(f"Database call failed ({action}): {exc}")
        raise translate_error(exc, action) from exc


def rows(response: Any) -> list[dict[str, Any]]:
    return list(response.data or []) if response is not None else []


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable timestamp {value!r}")
        return None
