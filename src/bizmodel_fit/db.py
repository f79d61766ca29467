"""Database connection and schema management.

Data is stored in ~/.bizmodel-fit/data.db by default; DATABASE_URL points
the app at any other async SQLAlchemy URL.
WAL mode is enabled for concurrent reads while requests write. Transactions
start with BEGIN IMMEDIATE, so writers queue on busy_timeout instead of
failing with "database is locked".
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.expanduser("~/.bizmodel-fit")


def get_data_dir() -> Path:
    """Get the data directory, creating it if needed."""
    data_dir = Path(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_url() -> str:
    """Get the database URL."""
    url = os.environ.get("DATABASE_URL", "")
    if url:
        return url
    db_path = get_data_dir() / "data.db"
    return f"sqlite+aiosqlite:///{db_path}"


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    """Enable WAL mode for concurrent reads during writes, and foreign keys."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # SQLAlchemy emits BEGIN itself (see _begin) so SAVEPOINTs nest correctly.
    dbapi_connection.isolation_level = None


def _begin(conn):
    # Take the write lock up front: a deferred transaction that reads, then
    # writes cannot upgrade once another writer has committed in WAL mode.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


_engine = None
_session_factory = None


def get_engine():
    global _engine
    if _engine is None:
        url = get_db_url()
        _engine = create_async_engine(url, echo=False)
        if url.startswith("sqlite"):
            event.listen(_engine.sync_engine, "connect", _set_sqlite_pragmas)
            event.listen(_engine.sync_engine, "begin", _begin)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def init_db():
    """Create all tables if they don't exist."""
    from .sqlmodels import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


async def close_db():
    """Close the database engine."""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
