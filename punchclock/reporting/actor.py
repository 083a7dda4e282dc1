"""Dramatiq actor running report jobs off the request path.

Workers start with ``dramatiq punchclock.reporting.actor``. Importing this
module configures the broker (see :mod:`punchclock.reporting._broker`).

Usage
-----
>>> generate_report_job.send(
...     "postgresql+asyncpg://...",
...     42,
... )

"""

from __future__ import annotations

import asyncio
import threading
import typing as typ
from pathlib import Path

import dramatiq
from sqlalchemy.pool import NullPool

from punchclock.common.db import build_session_factory, create_engine
from punchclock.reporting._broker import ensure_broker_configured
from punchclock.reporting.config import ReportingConfig
from punchclock.reporting.executor import ReportExecutor
from punchclock.reporting.filesystem_sink import FilesystemArtifactSink

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from punchclock.common.db import SessionFactory

REPORTS_QUEUE = "reports"

# Reused across actor invocations; each invocation runs its own event loop,
# so engines use NullPool and never hand a connection to another loop.
_ENGINE_CACHE: dict[str, AsyncEngine] = {}
_SESSION_FACTORY_CACHE: dict[str, SessionFactory] = {}
_EXECUTOR_CACHE: dict[str, ReportExecutor] = {}
_CACHE_LOCK = threading.Lock()


def _ensure_session_factory_locked(database_url: str) -> SessionFactory:
    """Return the cached session factory for *database_url*, creating it if absent.

    Precondition: the caller **must** hold ``_CACHE_LOCK``.
    """
    if database_url not in _SESSION_FACTORY_CACHE:
        if database_url not in _ENGINE_CACHE:
            _ENGINE_CACHE[database_url] = create_engine(
                database_url, poolclass=NullPool
            )
        _SESSION_FACTORY_CACHE[database_url] = build_session_factory(
            _ENGINE_CACHE[database_url]
        )
    return _SESSION_FACTORY_CACHE[database_url]


def _get_or_create_executor(database_url: str) -> ReportExecutor:
    """Get or create a ReportExecutor with cached dependencies.

    Thread-safe: Dramatiq runs actors on several worker threads.
    """
    with _CACHE_LOCK:
        if database_url not in _EXECUTOR_CACHE:
            config = ReportingConfig.from_env()
            _EXECUTOR_CACHE[database_url] = ReportExecutor(
                _ensure_session_factory_locked(database_url),
                sink=FilesystemArtifactSink(Path(config.report_dir)),
                config=config,
            )
        return _EXECUTOR_CACHE[database_url]


def reset_caches() -> None:
    """Drop cached engines and executors (used between test databases)."""
    with _CACHE_LOCK:
        _ENGINE_CACHE.clear()
        _SESSION_FACTORY_CACHE.clear()
        _EXECUTOR_CACHE.clear()


ensure_broker_configured()


@dramatiq.actor(queue_name=REPORTS_QUEUE, max_retries=0)
def generate_report_job(database_url: str, report_id: int) -> str:
    """Generate the CSV artifact for one queued report.

    Parameters
    ----------
    database_url
        SQLAlchemy URL of the database holding the report.
    report_id
        Internal id of the report to process.

    Returns
    -------
    str
        The report's final status.

    Raises
    ------
    ReportGenerationError
        If generation failed; the report is already marked ``failed``.

    """
    executor = _get_or_create_executor(database_url)
    report = asyncio.run(executor.perform(report_id))
    return str(report.status)


def enqueue_report(database_url: str) -> typ.Callable[[int], object]:
    """Return an enqueue callable bound to ``database_url`` for ReportService."""

    def send(report_id: int) -> object:
        return generate_report_job.send(database_url, report_id)

    return send
