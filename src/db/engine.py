"""Async database engine configuration for the energy table."""

import logging
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from repository.model.energy_model import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/energy.db"

_ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def normalize_database_url(url: str) -> str:
    """
    Map plain connection strings onto their asyncio drivers.

    ``postgresql://user@host/db`` becomes ``postgresql+asyncpg://user@host/db``;
    URLs that already name a driver are returned unchanged.
    """
    scheme, sep, rest = url.partition("://")
    if not sep:
        raise ValueError(f"Invalid database URL: {url!r}")
    return f"{_ASYNC_DRIVERS.get(scheme, scheme)}://{rest}"


def create_energy_engine(database_url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the measurement store.

    Args:
        database_url: SQLAlchemy URL (plain postgresql:// and sqlite:// are accepted)
        echo: Whether to echo SQL statements (for debugging)

    Returns:
        Configured AsyncEngine instance
    """
    url = make_url(normalize_database_url(database_url))

    if url.get_backend_name() == "sqlite":
        # Ensure parent directory exists
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        engine = create_async_engine(url, echo=echo)

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            """Set SQLite PRAGMA settings on connection."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()
            logger.debug("SQLite PRAGMA settings applied")

    else:
        engine = create_async_engine(url, echo=echo, pool_pre_ping=True)

    logger.info(f"Created async engine: {url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_database(engine: AsyncEngine) -> None:
    """Create the energy table if it doesn't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema initialized")
