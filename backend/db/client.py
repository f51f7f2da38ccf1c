"""
Supabase client factory.

All persistence goes through PostgREST via supabase-py. The backend issues
its own JWTs and enforces roles in the API layer, so the database is accessed
with a single service-role client shared by the whole process.
"""

import logging
from typing import Optional

from backend.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client, creating it on first use.

    Returns:
        A Supabase client authenticated with the service-role key.

    Raises:
        RuntimeError: If SUPABASE_URL or the API key is not configured.
    """
    global _client

    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            raise RuntimeError(
                "Supabase is not configured. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
            )

        _client = create_client(
            supabase_url=settings.SUPABASE_URL,
            supabase_key=settings.SUPABASE_SERVICE_ROLE_KEY
        )
        logger.info("Created Supabase client")

    return _client


def reset_supabase_client() -> None:
    """Drop the cached client (used by tests and after config changes)."""
    global _client
    _client = None
