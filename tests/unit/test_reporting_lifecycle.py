"""Unit tests for report status transitions."""

from __future__ import annotations

import datetime as dt

import pytest

from punchclock.reporting.errors import InvalidReportTransitionError
from punchclock.reporting.lifecycle import advance_report, can_transition
from punchclock.reporting.storage import Report, ReportStatus


def _report(status: ReportStatus, progress: int = 0) -> Report:
    return Report(
        user_id=1,
        process_id="00000000-0000-4000-8000-000000000000",
        status=status,
        progress=progress,
        start_date=dt.date(2025, 9, 1),
        end_date=dt.date(2025, 9, 30),
    )


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        (ReportStatus.QUEUED, ReportStatus.PROCESSING, True),
        (ReportStatus.QUEUED, ReportStatus.COMPLETED, False),
        (ReportStatus.QUEUED, ReportStatus.FAILED, False),
        (ReportStatus.PROCESSING, ReportStatus.PROCESSING, True),
        (ReportStatus.PROCESSING, ReportStatus.COMPLETED, True),
        (ReportStatus.PROCESSING, ReportStatus.FAILED, True),
        (ReportStatus.PROCESSING, ReportStatus.QUEUED, False),
        (ReportStatus.COMPLETED, ReportStatus.PROCESSING, False),
        (ReportStatus.COMPLETED, ReportStatus.FAILED, False),
        (ReportStatus.FAILED, ReportStatus.QUEUED, False),
        (ReportStatus.FAILED, ReportStatus.PROCESSING, False),
    ],
)
def test_transition_table(
    current: ReportStatus, target: ReportStatus, *, allowed: bool
) -> None:
    """Only queued->processing->completed|failed edges exist."""
    assert can_transition(current, target) is allowed, f"{current} -> {target}"


class TestAdvanceReport:
    """Tests for advance_report."""

    def test_records_status_and_progress(self) -> None:
        """A legal transition updates status and progress in place."""
        report = _report(ReportStatus.QUEUED)

        advance_report(report, ReportStatus.PROCESSING, progress=10)

        assert report.status is ReportStatus.PROCESSING
        assert report.progress == 10

    def test_optional_fields_kept_unless_given(self) -> None:
        """file_path and error_message change only when passed."""
        report = _report(ReportStatus.PROCESSING, progress=70)
        report.error_message = None

        advance_report(
            report, ReportStatus.COMPLETED, progress=100, file_path="/tmp/r.csv"
        )

        assert report.file_path == "/tmp/r.csv"
        assert report.error_message is None

    def test_failure_clears_progress(self) -> None:
        """A failed report records its message and zero progress."""
        report = _report(ReportStatus.PROCESSING, progress=70)

        advance_report(
            report,
            ReportStatus.FAILED,
            progress=0,
            file_path=None,
            error_message="Disk full",
        )

        assert (report.status, report.progress, report.error_message) == (
            ReportStatus.FAILED,
            0,
            "Disk full",
        )

    @pytest.mark.parametrize("terminal", [ReportStatus.COMPLETED, ReportStatus.FAILED])
    def test_terminal_states_are_final(self, terminal: ReportStatus) -> None:
        """Completed and failed reports cannot move again."""
        report = _report(terminal)

        with pytest.raises(InvalidReportTransitionError) as excinfo:
            advance_report(report, ReportStatus.PROCESSING, progress=10)

        assert excinfo.value.current is terminal
        assert report.status is terminal, "the report must be left untouched"

    def test_progress_out_of_range(self) -> None:
        """Progress must stay within 0..100."""
        report = _report(ReportStatus.PROCESSING)

        with pytest.raises(ValueError, match="0..100"):
            advance_report(report, ReportStatus.PROCESSING, progress=101)
