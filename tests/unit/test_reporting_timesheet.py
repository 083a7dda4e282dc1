"""Unit tests for the CSV time-sheet renderer."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import zoneinfo

import pytest

from punchclock.reporting.timesheet import (
    TimesheetSubject,
    format_duration,
    render_timesheet_csv,
)

HEADER = "Nome do Usuário,Email,Data,Entrada,Saída,Horas Trabalhadas,Status"
SUBJECT = TimesheetSubject(name="Ana Souza", email="ana@example.com")


@dc.dataclass(frozen=True, slots=True)
class _Interval:
    clock_in: dt.datetime
    clock_out: dt.datetime | None = None


def _utc(day: int, hour: int, minute: int = 0, second: int = 0) -> dt.datetime:
    return dt.datetime(2025, 9, day, hour, minute, second, tzinfo=dt.UTC)


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            (dt.timedelta(0), "0h 0m"),
            (dt.timedelta(hours=9), "9h 0m"),
            (dt.timedelta(hours=8, minutes=59, seconds=59), "8h 59m"),
            (dt.timedelta(minutes=59, seconds=59), "0h 59m"),
            (dt.timedelta(hours=27, minutes=5), "27h 5m"),
        ],
    )
    def test_floors_hours_and_minutes(
        self, duration: dt.timedelta, expected: str
    ) -> None:
        """Both parts are floored, never rounded."""
        assert format_duration(duration) == expected


class TestRenderTimesheetCsv:
    """Tests for render_timesheet_csv."""

    def test_empty_input_renders_header_only(self) -> None:
        """No registers produce only the header and no total row."""
        content = render_timesheet_csv([], SUBJECT, tz=dt.UTC)

        assert content == f"{HEADER}\n".encode()

    def test_rows_and_total(self) -> None:
        """Each register is one row followed by the summed total."""
        registers = [
            _Interval(_utc(1, 8), _utc(1, 17)),
            _Interval(_utc(2, 9), _utc(2, 18)),
        ]

        content = render_timesheet_csv(registers, SUBJECT, tz=dt.UTC)
        lines = content.decode().splitlines()

        assert lines == [
            HEADER,
            "Ana Souza,ana@example.com,01/09/2025,08:00:00,17:00:00,9h 0m,Finalizado",
            "Ana Souza,ana@example.com,02/09/2025,09:00:00,18:00:00,9h 0m,Finalizado",
            ",,,,,Total: 18h 0m,",
        ]

    def test_open_register_counts_zero(self) -> None:
        """Open registers show the in-progress marker and add nothing."""
        registers = [
            _Interval(_utc(1, 8), _utc(1, 17)),
            _Interval(_utc(2, 9, 15, 30)),
        ]

        content = render_timesheet_csv(registers, SUBJECT, tz=dt.UTC)
        lines = content.decode().splitlines()

        assert lines[2] == (
            "Ana Souza,ana@example.com,02/09/2025,09:15:30,"
            "Em andamento,0h 0m,Em andamento"
        )
        assert lines[-1] == ",,,,,Total: 9h 0m,"

    def test_total_sums_seconds_before_flooring(self) -> None:
        """Partial minutes from several registers add up before flooring."""
        registers = [
            _Interval(_utc(1, 8), _utc(1, 8, 0, 40)),
            _Interval(_utc(1, 9), _utc(1, 9, 0, 40)),
        ]

        content = render_timesheet_csv(registers, SUBJECT, tz=dt.UTC).decode()

        assert content.endswith(",,,,,Total: 0h 1m,\n")

    def test_times_render_in_report_timezone(self) -> None:
        """Dates and times are shown in the configured zone."""
        zone = zoneinfo.ZoneInfo("America/Sao_Paulo")
        registers = [_Interval(_utc(2, 2), _utc(2, 4))]

        lines = render_timesheet_csv(registers, SUBJECT, tz=zone).decode().splitlines()

        assert lines[1].split(",")[2:5] == ["01/09/2025", "23:00:00", "01:00:00"]

    def test_fields_with_commas_are_quoted(self) -> None:
        """Minimal quoting keeps the column count intact."""
        subject = TimesheetSubject(name="Souza, Ana", email="ana@example.com")

        content = render_timesheet_csv(
            [_Interval(_utc(1, 8), _utc(1, 9))], subject, tz=dt.UTC
        ).decode()

        assert content.splitlines()[1].startswith('"Souza, Ana",ana@example.com,')

    def test_output_is_deterministic(self) -> None:
        """Rendering the same input twice yields identical bytes."""
        registers = [_Interval(_utc(1, 8), _utc(1, 17))]

        first = render_timesheet_csv(registers, SUBJECT, tz=dt.UTC)
        second = render_timesheet_csv(registers, SUBJECT, tz=dt.UTC)

        assert first == second
