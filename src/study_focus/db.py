"""Async engine and session factory for the session/score store.

By default everything lives in one SQLite file, ``data.db`` under DATA_DIR
(``~/.study-focus``). DATABASE_URL replaces the whole URL, which is how tests
point the store at a throwaway database. The engine is created on first use
and shared until close_db().
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.study-focus"
DB_FILENAME = "data.db"

# Session history reads run alongside score upserts; WAL keeps them from blocking.
SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA busy_timeout=5000",
)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_db_url() -> str:
    """DATABASE_URL if set, else the SQLite file in DATA_DIR (created on demand)."""
    url = os.environ.get("DATABASE_URL")
    if url:
        return url
    data_dir = Path(os.path.expanduser(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR)))
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{data_dir / DB_FILENAME}"


def _apply_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        engine = create_async_engine(get_db_url(), echo=False)
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _apply_sqlite_pragmas)
        _engine = engine
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def init_db():
    """Create the study_sessions and fatigue_scores tables if missing."""
    from .sqlmodels import Base

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Store ready at %s", engine.url.render_as_string(hide_password=True))


async def close_db():
    """Dispose of the shared engine; the next get_engine() starts fresh."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
