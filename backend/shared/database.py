"""
Supabase client for the credential store.

Registration and login run before any user session exists, so the store
always connects with the service role key. One client is shared per
process.
"""

from typing import Optional
from supabase import Client, ClientOptions, create_client

from .config import Settings, get_settings

_service_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Return the process-wide service-role client, creating it on first use.

    Raises:
        RuntimeError: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set
    """
    global _service_client

    if _service_client is None:
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
            options=ClientOptions(postgrest_client_timeout=settings.supabase_timeout_seconds),
        )

    return _service_client


def reset_client_cache() -> None:
    """Drop the cached client so the next call reconnects."""
    global _service_client
    _service_client = None
