"""Emit structured observability events for the report job lifecycle.

Every event is one log line prefixed with its ``[reporting.report.*]``
identifier followed by ``key=value`` pairs, so operators can grep a single
report's history by ``process_id``.

Usage
-----
>>> event_logger = ReportingEventLogger()
>>> event_logger.log_report_started(process_id="9f1c...", user_id=7)

"""

from __future__ import annotations

import enum
import typing as typ

from punchclock.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class ReportingEventType(enum.StrEnum):
    """Structured log event types for report jobs."""

    REPORT_QUEUED = "reporting.report.queued"
    REPORT_STARTED = "reporting.report.started"
    REPORT_CHECKPOINT = "reporting.report.checkpoint"
    REPORT_COMPLETED = "reporting.report.completed"
    REPORT_FAILED = "reporting.report.failed"
    REPORT_SKIPPED = "reporting.report.skipped"


class ReportingEventLogger:
    """Emit structured reporting events via femtologging.

    Parameters
    ----------
    sink_logger
        Logger receiving the events; defaults to this module's logger.

    """

    def __init__(self, sink_logger: typ.Any | None = None) -> None:  # noqa: ANN401
        """Bind the event logger to a femtologging logger."""
        self._logger = sink_logger if sink_logger is not None else logger

    def log_report_queued(
        self,
        *,
        process_id: str,
        user_id: int,
        start_date: dt.date,
        end_date: dt.date,
    ) -> None:
        """Log acceptance of a new report request."""
        log_info(
            self._logger,
            "[%s] process_id=%s user_id=%s start_date=%s end_date=%s",
            ReportingEventType.REPORT_QUEUED,
            process_id,
            user_id,
            start_date.isoformat(),
            end_date.isoformat(),
        )

    def log_report_started(self, *, process_id: str, user_id: int) -> None:
        """Log the queued to processing transition."""
        log_info(
            self._logger,
            "[%s] process_id=%s user_id=%s",
            ReportingEventType.REPORT_STARTED,
            process_id,
            user_id,
        )

    def log_report_checkpoint(self, *, process_id: str, progress: int) -> None:
        """Log an intermediate progress checkpoint."""
        log_info(
            self._logger,
            "[%s] process_id=%s progress=%s",
            ReportingEventType.REPORT_CHECKPOINT,
            process_id,
            progress,
        )

    def log_report_completed(
        self,
        *,
        process_id: str,
        register_count: int,
        location: str,
        duration: dt.timedelta,
    ) -> None:
        """Log a completed report and where its artifact lives.

        Parameters
        ----------
        process_id
            Public report token.
        register_count
            Number of time registers rendered into the artifact.
        location
            Location string returned by the artifact sink.
        duration
            Elapsed time between start and completion.

        """
        log_info(
            self._logger,
            "[%s] process_id=%s registers=%s location=%s duration_seconds=%.3f",
            ReportingEventType.REPORT_COMPLETED,
            process_id,
            register_count,
            location,
            duration.total_seconds(),
        )

    def log_report_failed(
        self,
        *,
        process_id: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed generation with the fault attached.

        Parameters
        ----------
        process_id
            Public report token.
        error
            Fault raised during generation.
        duration
            Elapsed time between start and failure.

        """
        log_error(
            self._logger,
            "[%s] process_id=%s duration_seconds=%.3f error_type=%s error_message=%s",
            ReportingEventType.REPORT_FAILED,
            process_id,
            duration.total_seconds(),
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_report_skipped(self, *, process_id: str, status: str) -> None:
        """Log a job delivery for a report that already finished."""
        log_warning(
            self._logger,
            "[%s] process_id=%s status=%s",
            ReportingEventType.REPORT_SKIPPED,
            process_id,
            status,
        )
