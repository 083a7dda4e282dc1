"""Run one report job from ``queued`` to ``completed`` or ``failed``.

Each checkpoint is committed in its own transaction so a client polling the
status endpoint sees progress move through 10, 30, 70 and 100. A fault
raised after the report entered ``processing`` is recorded on the report
(``failed``, progress 0, ``error_message``) and then re-raised as
:class:`ReportGenerationError` so the job runner also sees the failure.
Checkpoints are not resume points: a redelivered job for a report still in
``processing`` starts over at 10.

Usage
-----
>>> executor = ReportExecutor(
...     session_factory,
...     sink=FilesystemArtifactSink(Path("tmp/reports")),
... )
>>> report = await executor.perform(report_id)

"""

from __future__ import annotations

import typing as typ

from punchclock.common.time import day_span, resolve_timezone, utcnow
from punchclock.logging import get_logger, log_debug
from punchclock.registers.service import fetch_registers_in_window
from punchclock.reporting.config import ReportingConfig
from punchclock.reporting.errors import ReportGenerationError, ReportNotFoundError
from punchclock.reporting.lifecycle import advance_report
from punchclock.reporting.observability import ReportingEventLogger
from punchclock.reporting.sink import ArtifactMetadata
from punchclock.reporting.storage import Report, ReportStatus
from punchclock.reporting.timesheet import TimesheetSubject, render_timesheet_csv
from punchclock.staff.service import load_user

if typ.TYPE_CHECKING:
    import datetime as dt

    from punchclock.common.db import SessionFactory
    from punchclock.reporting.sink import ArtifactSink

logger = get_logger(__name__)

PROGRESS_STARTED = 10
PROGRESS_FETCHED = 30
PROGRESS_RENDERED = 70
PROGRESS_DONE = 100


class ReportExecutor:
    """Generate the CSV artifact for a queued report."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        sink: ArtifactSink,
        config: ReportingConfig | None = None,
        event_logger: ReportingEventLogger | None = None,
        clock: typ.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Configure the executor.

        Parameters
        ----------
        session_factory
            Async session factory for the report and register tables.
        sink
            Where finished artifacts are stored.
        config
            Report settings; defaults to ``ReportingConfig()``.
        event_logger
            Lifecycle event emitter; a default one is created when omitted.
        clock
            Source of "now", used for durations and artifact timestamps.

        """
        self._session_factory = session_factory
        self._sink = sink
        self._config = config or ReportingConfig()
        self._tz = resolve_timezone(self._config.timezone)
        self._events = event_logger or ReportingEventLogger()
        self._clock = clock

    async def perform(self, report_id: int) -> Report:
        """Run the job for ``report_id`` and return the final report state.

        Completed and failed reports are returned untouched. A report left
        in ``processing`` by an interrupted worker is run again from the
        start.

        Raises
        ------
        ReportNotFoundError
            If no report has ``report_id``.
        ReportGenerationError
            If generation failed; the report has already been marked
            ``failed`` when this is raised.

        """
        started_at = self._clock()
        async with self._session_factory() as session, session.begin():
            report = await session.get(Report, report_id)
            if report is None:
                raise ReportNotFoundError(report_id)
            if report.is_terminal:
                self._events.log_report_skipped(
                    process_id=report.process_id, status=str(report.status)
                )
                return report
            advance_report(report, ReportStatus.PROCESSING, progress=PROGRESS_STARTED)
        self._events.log_report_started(
            process_id=report.process_id, user_id=report.user_id
        )

        try:
            return await self._generate(report, started_at)
        except Exception as exc:
            await self._checkpoint(
                report_id,
                ReportStatus.FAILED,
                progress=0,
                file_path=None,
                error_message=str(exc),
            )
            self._events.log_report_failed(
                process_id=report.process_id,
                error=exc,
                duration=self._clock() - started_at,
            )
            raise ReportGenerationError(report.process_id, exc) from exc

    async def _generate(self, report: Report, started_at: dt.datetime) -> Report:
        window_start, window_end = day_span(
            report.start_date, report.end_date, self._tz
        )
        async with self._session_factory() as session:
            user = await load_user(session, report.user_id)
            registers = await fetch_registers_in_window(
                session, report.user_id, window_start, window_end
            )
        log_debug(
            logger,
            "Fetched %s registers for report %s between %s and %s",
            len(registers),
            report.process_id,
            window_start.isoformat(),
            window_end.isoformat(),
        )
        await self._checkpoint(
            report.id, ReportStatus.PROCESSING, progress=PROGRESS_FETCHED
        )

        content = render_timesheet_csv(
            registers, TimesheetSubject(name=user.name, email=user.email), tz=self._tz
        )
        await self._checkpoint(
            report.id, ReportStatus.PROCESSING, progress=PROGRESS_RENDERED
        )

        metadata = ArtifactMetadata(
            process_id=report.process_id,
            generated_at=int(self._clock().timestamp()),
        )
        location = await self._sink.write_artifact(content, metadata=metadata)
        finished = await self._checkpoint(
            report.id,
            ReportStatus.COMPLETED,
            progress=PROGRESS_DONE,
            file_path=location,
            error_message=None,
        )
        self._events.log_report_completed(
            process_id=report.process_id,
            register_count=len(registers),
            location=location,
            duration=self._clock() - started_at,
        )
        return finished

    async def _checkpoint(
        self,
        report_id: int,
        target: ReportStatus,
        *,
        progress: int,
        **fields: str | None,
    ) -> Report:
        """Apply one lifecycle step in its own committed transaction."""
        async with self._session_factory() as session, session.begin():
            report = await session.get(Report, report_id)
            if report is None:
                raise ReportNotFoundError(report_id)
            advance_report(report, target, progress=progress, **fields)
        if target is ReportStatus.PROCESSING:
            self._events.log_report_checkpoint(
                process_id=report.process_id, progress=progress
            )
        return report
