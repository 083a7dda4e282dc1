"""Request-side report operations: create, poll and download.

``ReportService`` never generates artifacts itself. ``create`` validates the
request, commits a ``queued`` report and hands its id to an enqueue
callable (the dramatiq actor's ``send`` in production, a list append in
tests). Generation happens in :class:`punchclock.reporting.executor.ReportExecutor`.

Usage
-----
>>> service = ReportService(session_factory, sink=sink, enqueue=queue.append)
>>> report = await service.create(user_id, "2025-09-01", "2025-09-30")
>>> view = await service.get_status(report.process_id)
>>> view.status
'queued'

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import typing as typ

from sqlalchemy import select

from punchclock.common.slug import compact_date, parameterize
from punchclock.reporting.errors import (
    InvalidReportDateError,
    MissingReportDatesError,
    ReportArtifactMissingError,
    ReportNotFoundError,
    ReportNotReadyError,
    ReportWindowOrderError,
)
from punchclock.reporting.observability import ReportingEventLogger
from punchclock.reporting.storage import Report, ReportStatus
from punchclock.reporting.timesheet import CONTENT_TYPE
from punchclock.staff.service import load_user

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from punchclock.common.db import SessionFactory
    from punchclock.reporting.sink import ArtifactSink

type EnqueueReport = typ.Callable[[int], object]

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


@dc.dataclass(frozen=True, slots=True)
class ReportStatusView:
    """Polling snapshot of a report job."""

    process_id: str
    status: ReportStatus
    progress: int
    error_message: str | None


@dc.dataclass(frozen=True, slots=True)
class ReportArtifact:
    """A finished report ready to be streamed to the client."""

    content: bytes
    filename: str
    content_type: str = CONTENT_TYPE


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _report_window(start_date: object, end_date: object) -> tuple[dt.date, dt.date]:
    if _is_blank(start_date) or _is_blank(end_date):
        raise MissingReportDatesError
    start = parse_report_date(start_date, "start_date")
    end = parse_report_date(end_date, "end_date")
    if end < start:
        raise ReportWindowOrderError
    return start, end


def parse_report_date(value: object, field: str) -> dt.date:
    """Return ``value`` as a calendar date.

    Strings must be ISO ``YYYY-MM-DD``; ``datetime`` instances are rejected
    because a report window is expressed in whole days.

    Raises
    ------
    InvalidReportDateError
        If ``value`` is not a valid calendar date.

    """
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return value
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value.strip()):
        raise InvalidReportDateError(field, value)
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidReportDateError(field, value) from exc


def download_filename(user_name: str, start_date: dt.date, end_date: dt.date) -> str:
    """Return the suggested download name for a report.

    >>> download_filename("João Silva", dt.date(2025, 9, 1), dt.date(2025, 9, 30))
    'relatorio_ponto_joao-silva_20250901_20250930.csv'

    """
    return (
        f"relatorio_ponto_{parameterize(user_name)}_"
        f"{compact_date(start_date)}_{compact_date(end_date)}.csv"
    )


class ReportService:
    """Create report jobs and serve their status and artifacts."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        sink: ArtifactSink,
        enqueue: EnqueueReport,
        event_logger: ReportingEventLogger | None = None,
    ) -> None:
        """Configure the service.

        Parameters
        ----------
        session_factory
            Async session factory for the report tables.
        sink
            Artifact storage used to read finished reports back.
        enqueue
            Called with the new report's id once its row is committed.
        event_logger
            Lifecycle event emitter; a default one is created when omitted.

        """
        self._session_factory = session_factory
        self._sink = sink
        self._enqueue = enqueue
        self._events = event_logger or ReportingEventLogger()

    async def create(
        self,
        user_id: int,
        start_date: object,
        end_date: object,
    ) -> Report:
        """Validate a report request, persist it as ``queued`` and enqueue it.

        The user is resolved before the dates are checked, so an unknown
        user is reported as not found whatever the dates hold.

        Raises
        ------
        UserNotFoundError
            If ``user_id`` does not exist.
        MissingReportDatesError
            If either date is absent or blank.
        InvalidReportDateError
            If a date is not ``YYYY-MM-DD``.
        ReportWindowOrderError
            If ``end_date`` precedes ``start_date``.

        """
        async with self._session_factory() as session, session.begin():
            await load_user(session, user_id)
            start, end = _report_window(start_date, end_date)
            report = Report(
                user_id=user_id,
                start_date=start,
                end_date=end,
                status=ReportStatus.QUEUED,
                progress=0,
            )
            session.add(report)
            await session.flush()

        self._events.log_report_queued(
            process_id=report.process_id,
            user_id=user_id,
            start_date=start,
            end_date=end,
        )
        self._enqueue(report.id)
        return report

    async def get(self, process_id: str) -> Report:
        """Return the report identified by ``process_id``."""
        async with self._session_factory() as session:
            return await self._load(session, process_id)

    async def get_status(self, process_id: str) -> ReportStatusView:
        """Return the polling snapshot for ``process_id``.

        Raises
        ------
        ReportNotFoundError
            If no report has this token.

        """
        report = await self.get(process_id)
        return ReportStatusView(
            process_id=report.process_id,
            status=ReportStatus(report.status),
            progress=report.progress,
            error_message=report.error_message,
        )

    async def get_artifact(self, process_id: str) -> ReportArtifact:
        """Return the finished CSV for ``process_id``.

        Raises
        ------
        ReportNotFoundError
            If no report has this token.
        ReportNotReadyError
            If the report is not ``completed``.
        ReportArtifactMissingError
            If the stored file no longer exists.

        """
        async with self._session_factory() as session:
            report = await self._load(session, process_id)
            if report.status != ReportStatus.COMPLETED:
                raise ReportNotReadyError(ReportStatus(report.status))
            user = await load_user(session, report.user_id)
        if not report.file_path:
            raise ReportArtifactMissingError(process_id)
        try:
            content = await self._sink.read_artifact(report.file_path)
        except FileNotFoundError as exc:
            raise ReportArtifactMissingError(process_id) from exc
        return ReportArtifact(
            content=content,
            filename=download_filename(user.name, report.start_date, report.end_date),
        )

    @staticmethod
    async def _load(session: AsyncSession, process_id: str) -> Report:
        report = await session.scalar(
            select(Report).where(Report.process_id == process_id)
        )
        if report is None:
            raise ReportNotFoundError(process_id)
        return report
