"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and an `init_db` helper that creates
tables and seeds demo data when the tables are empty.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config import settings
from core.logger import get_logger
from .models import Base

logger = get_logger("database")

# Read/Write partitioning pattern
# In production, set WRITE_DATABASE_URL and READ_DATABASE_URL to different DB instances.
# For SQLite/demo both default to the same file but the interfaces are separated.
WRITE_DATABASE_URL = settings.write_database_url
READ_DATABASE_URL = settings.effective_read_database_url


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """Make every SQLite transaction start with BEGIN IMMEDIATE.

    SQLite ignores SELECT ... FOR UPDATE, so writers are serialized by taking
    the database write lock when the transaction begins instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# Engines
write_engine = create_engine(WRITE_DATABASE_URL, **_engine_kwargs(WRITE_DATABASE_URL))
read_engine = create_engine(READ_DATABASE_URL, **_engine_kwargs(READ_DATABASE_URL))

if WRITE_DATABASE_URL.startswith("sqlite"):
    enable_sqlite_immediate_transactions(write_engine)

# Session factories
WriteSessionLocal = sessionmaker(bind=write_engine)
ReadSessionLocal = sessionmaker(bind=read_engine)


def init_db(engine: Engine = None, session_factory=None, seed: bool = None):
    """Initialize database schema and optionally seed demo data.

    Args:
        engine: Engine to create tables on (default: the write engine).
        session_factory: Session factory used for seeding.
        seed: Seed empty tables; defaults to `settings.seed_on_startup`.
    """
    engine = engine or write_engine
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))

    if seed is None:
        seed = settings.seed_on_startup
    if not seed:
        return

    from data.seed_data import seed_all

    session = (session_factory or WriteSessionLocal)()
    try:
        seed_all(session)
    finally:
        session.close()


# Convenience generators for dependency injection
def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope.

    Use this generator as a FastAPI dependency to ensure the session is
    properly closed after the request completes.
    """
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope.

    Used for read endpoints where routing reads to a replica may be desired.
    """
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
