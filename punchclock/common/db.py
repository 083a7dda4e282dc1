"""Engine construction and schema bootstrap.

SQLite needs two adjustments to behave like the PostgreSQL deployment
target: foreign keys are off by default (so ``ON DELETE CASCADE`` would be
ignored), and pooled aiosqlite connections must not outlive the event loop
that opened them. :func:`create_engine` applies both.

Usage
-----
>>> engine = create_engine("sqlite+aiosqlite:///punchclock.db")
>>> await init_storage(engine)
>>> session_factory = build_session_factory(engine)

"""

from __future__ import annotations

import typing as typ

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from punchclock.common.storage import Base

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

type SessionFactory = async_sessionmaker[AsyncSession]


def _enable_sqlite_foreign_keys(dbapi_connection: typ.Any, _record: object) -> None:  # noqa: ANN401
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, **kwargs: typ.Any) -> AsyncEngine:  # noqa: ANN401
    """Create an async engine for ``database_url``.

    Parameters
    ----------
    database_url
        SQLAlchemy URL, e.g. ``postgresql+asyncpg://...`` or
        ``sqlite+aiosqlite:///path.db``.
    **kwargs
        Forwarded to :func:`sqlalchemy.ext.asyncio.create_async_engine`.

    Returns
    -------
    AsyncEngine
        Engine with SQLite foreign keys enabled where applicable.

    """
    is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
    if is_sqlite:
        kwargs.setdefault("poolclass", NullPool)
    engine = create_async_engine(database_url, **kwargs)
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def build_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Return the session factory used throughout Punchclock."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_storage(engine: AsyncEngine) -> None:
    """Create every Punchclock table that does not exist yet."""
    # Model modules register their tables on Base.metadata when imported.
    import punchclock.registers.storage
    import punchclock.reporting.storage
    import punchclock.staff.storage  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = ["SessionFactory", "build_session_factory", "create_engine", "init_storage"]
