# storefront/database.py
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Supabase Postgres connection (via pooler)
#
# - sslmode=require   : enforce SSL when running in the cloud
# - pool_size=1       : keep only 1 connection to the Supabase pooler
# - max_overflow=0    : do not open extra connections beyond the pool
# - pool_pre_ping=True: validate connections before using them
#
# Supabase Session mode limits the number of clients
# ("MaxClientsInSessionMode: max clients reached").
# Non-Postgres URLs (local sqlite) get the driver defaults.
# ---------------------------------------------------------


def _build_url(db_url: str) -> str:
    if not db_url.startswith("postgres"):
        return db_url
    # Append sslmode=require if it is not already present
    if "sslmode=" in db_url:
        return db_url
    separator = "&" if "?" in db_url else "?"
    return f"{db_url}{separator}sslmode=require"


def _engine_kwargs(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_size": 1, "max_overflow": 0}


db_url = _build_url(settings.DATABASE_URL)

engine = create_engine(
    db_url,
    echo=False,  # set to True if you want to debug SQL queries
    **_engine_kwargs(db_url),
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
