# woodshop/core/supabase_client.py
from functools import lru_cache

from supabase import Client, create_client

from woodshop.core.config import get_settings


@lru_cache
def supabase_public() -> Client:
    """
    Create a Supabase client with the anon/public key.

    This client respects RLS, which is what guest checkout relies on:
    the storefront policies allow anonymous inserts into orders/order_items.

    Raises:
        RuntimeError: if SUPABASE_URL / SUPABASE_KEY are not set.
    """
    settings = get_settings()
    if not (settings.SUPABASE_URL and settings.SUPABASE_KEY):
        raise RuntimeError("Missing SUPABASE_URL / SUPABASE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - admin order listing and status updates
      - compensating deletes that RLS would refuse to the anon role

    WARNING:
      - Never expose service role key to frontend.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    settings = get_settings()
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
