"""Report job resources: request, poll and download.

Routes
------
``POST /users/{user_id}/reports``
    Queue a report for a date range; responds 201 with the process token.
``GET /reports/{process_id}/status``
    Current status, progress and error message.
``GET /reports/{process_id}/download``
    The finished CSV as an attachment.

"""

from __future__ import annotations

import typing as typ

import falcon

from punchclock.api.bodies import ReportRequestBody, decode_body

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from punchclock.reporting.service import ReportService

__all__ = [
    "ReportDownloadResource",
    "ReportStatusResource",
    "UserReportsResource",
]


class UserReportsResource:
    """``POST /users/{user_id}/reports`` queues a new report."""

    def __init__(self, reporting_service: ReportService) -> None:
        """Configure the resource with the report service."""
        self._reporting_service = reporting_service

    async def on_post(self, req: Request, resp: Response, *, user_id: int) -> None:
        """Validate the date range and queue a report for ``user_id``.

        Parameters
        ----------
        req
            Falcon request with a ``{start_date, end_date}`` JSON body.
        resp
            Falcon response populated with ``{process_id, status}``.
        user_id
            User id from the URL path.

        """
        body = await decode_body(req, ReportRequestBody)
        report = await self._reporting_service.create(
            user_id, body.start_date, body.end_date
        )
        resp.media = {"process_id": report.process_id, "status": str(report.status)}
        resp.status = falcon.HTTP_201


class ReportStatusResource:
    """``GET /reports/{process_id}/status`` reports job progress."""

    def __init__(self, reporting_service: ReportService) -> None:
        """Configure the resource with the report service."""
        self._reporting_service = reporting_service

    async def on_get(self, _req: Request, resp: Response, *, process_id: str) -> None:
        """Return the polling snapshot for ``process_id``."""
        view = await self._reporting_service.get_status(process_id)
        resp.media = {
            "process_id": view.process_id,
            "status": str(view.status),
            "progress": view.progress,
            "error_message": view.error_message,
        }
        resp.status = falcon.HTTP_200


class ReportDownloadResource:
    """``GET /reports/{process_id}/download`` streams the finished CSV."""

    def __init__(self, reporting_service: ReportService) -> None:
        """Configure the resource with the report service."""
        self._reporting_service = reporting_service

    async def on_get(self, _req: Request, resp: Response, *, process_id: str) -> None:
        """Send the artifact as an attachment.

        Not-ready and missing-artifact cases are raised as domain errors and
        rendered by the registered error handlers (422 and 404).
        """
        artifact = await self._reporting_service.get_artifact(process_id)
        resp.content_type = artifact.content_type
        resp.downloadable_as = artifact.filename
        resp.data = artifact.content
        resp.status = falcon.HTTP_200
