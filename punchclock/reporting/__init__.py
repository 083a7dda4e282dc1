"""Asynchronous time-sheet report generation.

A report request is persisted as ``queued``, handed to a Dramatiq worker
and advanced through ``processing`` to ``completed`` or ``failed`` while
clients poll its status and finally download the CSV.

Public API
----------
ReportService
    Request-side operations: create, poll, download.
ReportExecutor
    Runs one job through its lifecycle and stores the artifact.
ReportingConfig
    Artifact directory and report time zone.
ArtifactSink
    Protocol (port) for durable artifact storage.
FilesystemArtifactSink
    Filesystem adapter for ``ArtifactSink``.
render_timesheet_csv
    Pure function rendering registers as the CSV time sheet.

The Dramatiq actor lives in :mod:`punchclock.reporting.actor` and is not
imported here, since importing it configures the global broker.

Example:
>>> service = ReportService(session_factory, sink=sink, enqueue=queue.append)
>>> report = await service.create(user_id, "2025-09-01", "2025-09-30")
>>> await ReportExecutor(session_factory, sink=sink).perform(report.id)

"""

from punchclock.reporting.config import ReportingConfig
from punchclock.reporting.errors import (
    InvalidReportDateError,
    InvalidReportTransitionError,
    MissingReportDatesError,
    ReportArtifactMissingError,
    ReportGenerationError,
    ReportingError,
    ReportNotFoundError,
    ReportNotReadyError,
    ReportWindowOrderError,
)
from punchclock.reporting.executor import ReportExecutor
from punchclock.reporting.filesystem_sink import FilesystemArtifactSink
from punchclock.reporting.lifecycle import advance_report, can_transition
from punchclock.reporting.service import (
    ReportArtifact,
    ReportService,
    ReportStatusView,
    download_filename,
)
from punchclock.reporting.sink import ArtifactMetadata, ArtifactSink
from punchclock.reporting.storage import Report, ReportStatus
from punchclock.reporting.timesheet import (
    TimesheetSubject,
    format_duration,
    render_timesheet_csv,
)

__all__ = [
    "ArtifactMetadata",
    "ArtifactSink",
    "FilesystemArtifactSink",
    "InvalidReportDateError",
    "InvalidReportTransitionError",
    "MissingReportDatesError",
    "Report",
    "ReportArtifact",
    "ReportArtifactMissingError",
    "ReportExecutor",
    "ReportGenerationError",
    "ReportNotFoundError",
    "ReportNotReadyError",
    "ReportService",
    "ReportStatus",
    "ReportStatusView",
    "ReportWindowOrderError",
    "ReportingConfig",
    "ReportingError",
    "TimesheetSubject",
    "advance_report",
    "can_transition",
    "download_filename",
    "format_duration",
    "render_timesheet_csv",
]
