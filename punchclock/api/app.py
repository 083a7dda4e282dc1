"""Application factory for the Punchclock Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when domain services are supplied,
the ``/api/v1`` routes for users, time registers and reports.

Usage
-----
Create a health-only app (no database)::

    app = create_app()

Create a full app with domain endpoints::

    from punchclock.api.app import AppDependencies, create_app

    deps = AppDependencies(
        session_factory=session_factory,
        staff_service=StaffService(session_factory),
        register_service=TimeRegisterService(session_factory),
        reporting_service=reporting_service,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from punchclock.api.errors import register_error_handlers
from punchclock.api.health.resources import HealthResource, ReadyResource

if typ.TYPE_CHECKING:
    from punchclock.common.db import SessionFactory
    from punchclock.registers.service import TimeRegisterService
    from punchclock.reporting.service import ReportService
    from punchclock.staff.service import StaffService

__all__ = ["API_PREFIX", "AppDependencies", "create_app"]

API_PREFIX = "/api/v1"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    When all three services are provided, the application registers the
    domain endpoints. Otherwise only health endpoints are registered.

    Attributes
    ----------
    session_factory
        Async session factory; used by the readiness probe.
    staff_service
        User directory operations.
    register_service
        Time register operations.
    reporting_service
        Report request, status and download operations.

    """

    session_factory: SessionFactory | None = None
    staff_service: StaffService | None = None
    register_service: TimeRegisterService | None = None
    reporting_service: ReportService | None = None


def _add_domain_routes(
    app: falcon.asgi.App,
    staff_service: StaffService,
    register_service: TimeRegisterService,
    reporting_service: ReportService,
) -> None:
    from punchclock.api.registers.resources import (
        ClockInResource,
        ClockOutResource,
        TimeRegisterCollectionResource,
        TimeRegisterItemResource,
    )
    from punchclock.api.reports.resources import (
        ReportDownloadResource,
        ReportStatusResource,
        UserReportsResource,
    )
    from punchclock.api.staff.resources import (
        UserCollectionResource,
        UserItemResource,
        UserTimeRegistersResource,
    )

    routes: list[tuple[str, object]] = [
        ("/users", UserCollectionResource(staff_service)),
        ("/users/{user_id:int}", UserItemResource(staff_service)),
        (
            "/users/{user_id:int}/time_registers",
            UserTimeRegistersResource(register_service),
        ),
        ("/users/{user_id:int}/clock_in", ClockInResource(register_service)),
        ("/users/{user_id:int}/clock_out", ClockOutResource(register_service)),
        ("/users/{user_id:int}/reports", UserReportsResource(reporting_service)),
        ("/time_registers", TimeRegisterCollectionResource(register_service)),
        (
            "/time_registers/{register_id:int}",
            TimeRegisterItemResource(register_service),
        ),
        ("/reports/{process_id}/status", ReportStatusResource(reporting_service)),
        (
            "/reports/{process_id}/download",
            ReportDownloadResource(reporting_service),
        ),
    ]
    for path, resource in routes:
        app.add_route(f"{API_PREFIX}{path}", resource)


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or incomplete,
        only ``/health`` and ``/ready`` are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    app = falcon.asgi.App()

    # Health endpoints are always available
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(deps.session_factory))

    if (
        deps.staff_service is not None
        and deps.register_service is not None
        and deps.reporting_service is not None
    ):
        _add_domain_routes(
            app, deps.staff_service, deps.register_service, deps.reporting_service
        )

    register_error_handlers(app)
    return app
