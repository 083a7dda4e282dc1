"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import asyncio
import typing as typ

import pytest
import pytest_asyncio

from punchclock.common.db import build_session_factory, create_engine, init_storage

if typ.TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine

    from punchclock.common.db import SessionFactory


def sqlite_url(tmp_path: Path, name: str = "punchclock_test.db") -> str:
    """Return an aiosqlite URL for a database file under ``tmp_path``."""
    return f"sqlite+aiosqlite:///{tmp_path / name}"


async def _setup_sqlite(url: str) -> AsyncEngine:
    """Create a SQLite engine and initialise every table."""
    engine = create_engine(url)
    try:
        await init_storage(engine)
    except Exception:
        await engine.dispose()
        raise
    return engine


@pytest_asyncio.fixture
async def session_factory(tmp_path: Path) -> typ.AsyncIterator[SessionFactory]:
    """Yield a fresh async session factory backed by sqlite."""
    engine = await _setup_sqlite(sqlite_url(tmp_path))
    try:
        yield build_session_factory(engine)
    finally:
        await engine.dispose()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """Return the URL of an initialised SQLite database for sync tests.

    Engines built by :func:`create_engine` use ``NullPool`` for SQLite, so
    the database can be shared by code running on different event loops
    (Falcon's test client, ``asyncio.run`` in steps, Dramatiq actors).
    """
    url = sqlite_url(tmp_path, "punchclock_sync.db")
    engine = asyncio.run(_setup_sqlite(url))
    asyncio.run(engine.dispose())
    return url


@pytest.fixture
def sync_session_factory(database_url: str) -> typ.Iterator[SessionFactory]:
    """Yield a session factory over :func:`database_url` for sync tests."""
    engine = create_engine(database_url)
    yield build_session_factory(engine)
    asyncio.run(engine.dispose())
