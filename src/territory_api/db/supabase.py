"""Supabase client for the territory backend."""

import logging
from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Shared client for PostgREST and Auth calls, or None when credentials are missing.

    The backend never keeps a user session of its own; tokens from callers are
    only checked through ``auth.get_user``.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (TERRITORY_SUPABASE_URL / TERRITORY_SUPABASE_KEY)")
        return None

    options = ClientOptions(
        postgrest_client_timeout=settings.supabase_timeout_seconds,
        auto_refresh_token=False,
        persist_session=False,
    )
    try:
        return create_client(settings.supabase_url, settings.supabase_key, options=options)
    except Exception as exc:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {exc}")
        return None
