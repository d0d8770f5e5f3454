# woodshop/database.py
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# Import models so SQLModel metadata is populated before create_all()
from woodshop.models import order as _order_models  # noqa: F401
from woodshop.models import product as _product_models  # noqa: F401
from woodshop.models import user as _user_models  # noqa: F401


def build_engine(database_url: str) -> Engine:
    """
    Build the engine used by the "sql" store backend.

    Supabase Postgres (via pooler):
      - sslmode=require   : enforce SSL when running in the cloud
      - pool_size=1       : Supabase session mode limits the number of clients
      - max_overflow=0    : never open more than the pool
      - pool_pre_ping=True: validate connections before using them

    SQLite URLs (local runs and tests) share one connection across threads
    so an in-memory database survives between requests.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    if "sslmode=" not in database_url:
        sep = "&" if "?" in database_url else "?"
        database_url = f"{database_url}{sep}sslmode=require"

    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=1,
        max_overflow=0,
    )


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.
    """
    SQLModel.metadata.create_all(engine)
