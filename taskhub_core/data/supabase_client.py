# =============================================================================
# taskhub_core/data/supabase_client.py
# Supabase Client Configuration for TaskHub
# Creates and caches the async client used by the gateway and session manager
# =============================================================================

from __future__ import annotations
from typing import Optional

from supabase import AsyncClient, acreate_client

from taskhub_core.config import Settings, get_settings
from taskhub_core.logging import get_logger

logger = get_logger(__name__)

# Global client reference for cleanup
_supabase_client: Optional[AsyncClient] = None


async def create_supabase_client(settings: Optional[Settings] = None) -> AsyncClient:
    """
    Create a new Supabase AsyncClient from settings.

    Raises:
        ConfigurationError: Supabase URL or key not configured
    """
    settings = settings or get_settings()
    settings.require_supabase()

    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client created for %s", settings.supabase_url)
    return client


async def get_supabase_client(settings: Optional[Settings] = None) -> AsyncClient:
    """
    Get the cached Supabase client (one per process).

    Returns:
        Shared AsyncClient instance
    """
    global _supabase_client
    if _supabase_client is None:
        _supabase_client = await create_supabase_client(settings)
    return _supabase_client


def set_supabase_client(client: Optional[AsyncClient]) -> None:
    """Install a client explicitly (tests, custom options)."""
    global _supabase_client
    _supabase_client = client


def close_supabase_client() -> None:
    """
    Drop the cached client; the next get_supabase_client() creates a new one.
    """
    global _supabase_client
    if _supabase_client is not None:
        _supabase_client = None
        logger.debug("Supabase client released")
