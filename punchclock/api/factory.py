"""Factory for building the API's domain services from configuration.

Report jobs are enqueued on the Dramatiq actor, so importing the actor (and
configuring the broker) happens here rather than at package import.

Usage
-----
Build dependencies for the API layer::

    from punchclock.api.factory import build_app_dependencies

    deps = build_app_dependencies(session_factory, database_url)

"""

from __future__ import annotations

import typing as typ

from punchclock.api.app import AppDependencies
from punchclock.registers.service import TimeRegisterService
from punchclock.reporting.config import ReportingConfig
from punchclock.reporting.filesystem_sink import FilesystemArtifactSink
from punchclock.reporting.observability import ReportingEventLogger
from punchclock.reporting.service import EnqueueReport, ReportService
from punchclock.staff.service import StaffService

if typ.TYPE_CHECKING:
    from punchclock.common.db import SessionFactory

__all__ = ["build_app_dependencies", "build_reporting_service"]


def build_reporting_service(
    session_factory: SessionFactory,
    *,
    enqueue: EnqueueReport,
    config: ReportingConfig | None = None,
) -> ReportService:
    """Build a ``ReportService`` reading artifacts from the configured directory.

    Parameters
    ----------
    session_factory
        Async session factory for database access.
    enqueue
        Callable receiving each new report id.
    config
        Reporting settings; read from the environment when omitted.

    Returns
    -------
    ReportService
        Configured request-side report service.

    """
    config = config or ReportingConfig.from_env()
    return ReportService(
        session_factory,
        sink=FilesystemArtifactSink(config.report_dir),
        enqueue=enqueue,
        event_logger=ReportingEventLogger(),
    )


def build_app_dependencies(
    session_factory: SessionFactory,
    database_url: str,
) -> AppDependencies:
    """Assemble every domain service, enqueuing reports via Dramatiq.

    Parameters
    ----------
    session_factory
        Async session factory shared by all services.
    database_url
        URL passed to workers so they open the same database.

    """
    from punchclock.reporting.actor import enqueue_report

    return AppDependencies(
        session_factory=session_factory,
        staff_service=StaffService(session_factory),
        register_service=TimeRegisterService(session_factory),
        reporting_service=build_reporting_service(
            session_factory, enqueue=enqueue_report(database_url)
        ),
    )
