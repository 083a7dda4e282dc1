"""Errors specific to the reporting module."""

from __future__ import annotations

import typing as typ

from punchclock.errors import (
    GenerationFailure,
    NotFoundError,
    NotReadyError,
    PunchclockError,
    ValidationError,
)

if typ.TYPE_CHECKING:
    from punchclock.reporting.storage import ReportStatus


class ReportingError(PunchclockError):
    """Base class for reporting module errors."""


class MissingReportDatesError(ValidationError, ReportingError):
    """Raised when ``start_date`` or ``end_date`` is absent."""

    rule = "missing_dates"

    def __init__(self) -> None:
        """Build the fixed error message."""
        super().__init__("start_date and end_date are required")


class InvalidReportDateError(ValidationError, ReportingError):
    """Raised when a date is not an ISO calendar date."""

    rule = "invalid_date"

    def __init__(self, field: str, value: object) -> None:
        """Initialize with the offending field and raw value."""
        self.value = value
        super().__init__("Invalid date format. Use YYYY-MM-DD format", field=field)


class ReportWindowOrderError(ValidationError, ReportingError):
    """Raised when ``end_date`` precedes ``start_date``."""

    rule = "end_before_start"

    def __init__(self) -> None:
        """Build the fixed error message."""
        super().__init__("end_date must be after start_date", field="end_date")


class ReportNotFoundError(NotFoundError, ReportingError):
    """Raised when no report matches a process token or id."""

    def __init__(self, reference: object) -> None:
        """Initialize with the unknown token or id."""
        self.reference = reference
        super().__init__("Report not found")


class ReportNotReadyError(NotReadyError, ReportingError):
    """Raised when an artifact is requested before the job completed."""

    def __init__(self, status: ReportStatus) -> None:
        """Initialize with the report's current status."""
        super().__init__(
            f"Report is not ready for download. Current status: {status}",
            status=str(status),
        )


class ReportArtifactMissingError(NotFoundError, ReportingError):
    """Raised when a completed report's stored file no longer exists."""

    def __init__(self, process_id: str) -> None:
        """Initialize with the report's process token."""
        self.process_id = process_id
        super().__init__("Report file not found or has been cleaned up")


class InvalidReportTransitionError(ReportingError):
    """Raised when a status change is not allowed by the lifecycle."""

    def __init__(self, current: ReportStatus, target: ReportStatus) -> None:
        """Initialize with the attempted transition."""
        self.current = current
        self.target = target
        super().__init__(f"Cannot move report from {current} to {target}")


class ReportGenerationError(GenerationFailure, ReportingError):
    """Raised after a failed generation has been recorded on the report.

    The triggering fault is chained as ``__cause__``; ``str()`` of this
    error repeats the fault's description, which is also what was stored in
    ``Report.error_message``.
    """

    def __init__(self, process_id: str, fault: BaseException) -> None:
        """Initialize with the report token and the triggering fault."""
        self.process_id = process_id
        self.fault = fault
        super().__init__(f"Report {process_id} failed: {fault}")
