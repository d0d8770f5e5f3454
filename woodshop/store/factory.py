# woodshop/store/factory.py
import logging

from woodshop.core.config import Settings
from woodshop.core.supabase_client import supabase_admin, supabase_public
from woodshop.database import build_engine, create_db_and_tables
from woodshop.store.base import ObjectStore
from woodshop.store.sql_store import SqlObjectStore
from woodshop.store.supabase_store import SupabaseObjectStore

logger = logging.getLogger(__name__)


def build_object_store(settings: Settings) -> ObjectStore:
    """
    Build the ObjectStore selected by STORE_BACKEND.

    - "supabase": PostgREST tables; service role client when the key is
      configured, anon client (RLS applies) otherwise.
    - "sql": SQLModel engine on DATABASE_URL; tables are created if missing.
    """
    if settings.STORE_BACKEND == "sql":
        if not settings.DATABASE_URL:
            raise RuntimeError("STORE_BACKEND=sql requires DATABASE_URL in .env")
        engine = build_engine(settings.DATABASE_URL)
        create_db_and_tables(engine)
        logger.info("Object store: SQL engine (%s)", engine.url.get_backend_name())
        return SqlObjectStore(engine)

    client = supabase_admin() if settings.SUPABASE_SERVICE_ROLE_KEY else supabase_public()
    logger.info("Object store: Supabase (%s)", settings.SUPABASE_URL)
    return SupabaseObjectStore(client)
