"""User profile lookups (role per Supabase Auth user)."""

from __future__ import annotations

from .database import execute, require_client, rows

PROFILES_TABLE = "profiles"


def fetch_role(user_id: str) -> str | None:
    supabase = require_client()
    query = supabase.table(PROFILES_TABLE).select("role").eq("user_id", user_id).limit(1)
    data = rows(execute(query, "load user profile"))
    return data[0].get("role") if data else None
