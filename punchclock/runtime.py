"""Punchclock runtime entrypoint.

This module provides the ASGI application factory served by Granian. It
delegates to :func:`punchclock.api.app.create_app` for application
construction while keeping the ``punchclock.runtime:create_app`` Granian
entrypoint stable.

When ``PUNCHCLOCK_DATABASE_URL`` is set, the runtime creates the schema,
builds the domain services and enqueues report jobs on Dramatiq. Otherwise
it starts in health-only mode.

Configuration is driven by environment variables:

- ``PUNCHCLOCK_HOST``: Bind address (default ``0.0.0.0``)
- ``PUNCHCLOCK_PORT``: Listen port (default ``8080``)
- ``PUNCHCLOCK_LOG_LEVEL``: Log level (default ``INFO``)
- ``PUNCHCLOCK_DATABASE_URL``: Database connection URL (optional; enables
  domain endpoints when set)
- ``PUNCHCLOCK_BROKER_URL``: Redis URL for report jobs (see
  :mod:`punchclock.reporting._broker`)

Run the service directly with ``python -m punchclock.runtime`` and the
report workers with ``dramatiq punchclock.reporting.actor``.
"""

from __future__ import annotations

import asyncio
import os
import typing as typ

from punchclock.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi
    from sqlalchemy.ext.asyncio import AsyncEngine

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid PUNCHCLOCK_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


async def _bootstrap_schema(engine: AsyncEngine) -> None:
    """Create missing tables, then drop connections opened on this loop."""
    from punchclock.common.db import init_storage

    await init_storage(engine)
    await engine.dispose()


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application; health-only unless
        ``PUNCHCLOCK_DATABASE_URL`` is set.

    """
    from punchclock.api.app import create_app as _create_api_app

    database_url = os.environ.get("PUNCHCLOCK_DATABASE_URL", "").strip()

    if not database_url:
        return _create_api_app()

    from punchclock.api.factory import build_app_dependencies
    from punchclock.common.db import build_session_factory, create_engine

    engine = create_engine(database_url)
    asyncio.run(_bootstrap_schema(engine))
    session_factory = build_session_factory(engine)
    return _create_api_app(build_app_dependencies(session_factory, database_url))


def main() -> None:
    """Start the Punchclock runtime server using Granian.

    Reads ``PUNCHCLOCK_HOST``, ``PUNCHCLOCK_PORT``, and
    ``PUNCHCLOCK_LOG_LEVEL`` from the environment and starts the ASGI server.
    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("PUNCHCLOCK_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("PUNCHCLOCK_PORT", "8080"))
    log_level_str = os.environ.get("PUNCHCLOCK_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid PUNCHCLOCK_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    log_info(
        logger,
        "Starting Punchclock runtime on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "punchclock.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
