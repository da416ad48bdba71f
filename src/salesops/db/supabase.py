"""Shared Supabase client for visit queries and the lead store."""

import logging
from functools import lru_cache
from urllib.parse import urlparse

from supabase import Client, create_client

from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the process-wide client, or None when credentials are missing.

    Repositories treat None as "no database" and fall back to local files or
    empty results. Creating the client does not open a connection, so query
    errors still surface at call time.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.warning("Supabase not configured (SALESOPS_SUPABASE_URL / SALESOPS_SUPABASE_KEY missing)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None
    logging.info(f"Supabase client ready for {urlparse(settings.supabase_url).netloc}")
    return client
