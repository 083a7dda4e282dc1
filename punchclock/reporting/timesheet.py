"""Render time registers as a CSV time sheet.

The layout is fixed (header labels, date and time formats, in-progress
marker) because downstream payroll spreadsheets import it by column
position and label.

Examples
--------
>>> import datetime as dt
>>> subject = TimesheetSubject(name="Ana", email="ana@example.com")
>>> print(render_timesheet_csv([], subject, tz=dt.UTC).decode())
Nome do Usuário,Email,Data,Entrada,Saída,Horas Trabalhadas,Status
<BLANKLINE>

"""

from __future__ import annotations

import csv
import dataclasses as dc
import datetime as dt
import io
import typing as typ

HEADER: typ.Final = (
    "Nome do Usuário",
    "Email",
    "Data",
    "Entrada",
    "Saída",
    "Horas Trabalhadas",
    "Status",
)
IN_PROGRESS: typ.Final = "Em andamento"
FINISHED: typ.Final = "Finalizado"
DATE_FORMAT: typ.Final = "%d/%m/%Y"
TIME_FORMAT: typ.Final = "%H:%M:%S"
CONTENT_TYPE: typ.Final = "text/csv"


class RegisterInterval(typ.Protocol):
    """Read-only view of a time register needed for rendering."""

    @property
    def clock_in(self) -> dt.datetime: ...

    @property
    def clock_out(self) -> dt.datetime | None: ...


@dc.dataclass(frozen=True, slots=True)
class TimesheetSubject:
    """The person a time sheet is about."""

    name: str
    email: str


def worked_time(register: RegisterInterval) -> dt.timedelta:
    """Return the closed interval's length, or zero while it is open."""
    if register.clock_out is None:
        return dt.timedelta(0)
    return register.clock_out - register.clock_in


def format_duration(duration: dt.timedelta) -> str:
    """Render a duration as ``"<h>h <m>m"`` with both parts floored.

    >>> format_duration(dt.timedelta(hours=8, minutes=59, seconds=59))
    '8h 59m'

    """
    total_seconds = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    return f"{hours}h {remainder // 60}m"


def _row(
    register: RegisterInterval, subject: TimesheetSubject, tz: dt.tzinfo
) -> list[str]:
    started = register.clock_in.astimezone(tz)
    if register.clock_out is None:
        ended, status = IN_PROGRESS, IN_PROGRESS
    else:
        ended = register.clock_out.astimezone(tz).strftime(TIME_FORMAT)
        status = FINISHED
    return [
        subject.name,
        subject.email,
        started.strftime(DATE_FORMAT),
        started.strftime(TIME_FORMAT),
        ended,
        format_duration(worked_time(register)),
        status,
    ]


def render_timesheet_csv(
    registers: typ.Iterable[RegisterInterval],
    subject: TimesheetSubject,
    *,
    tz: dt.tzinfo,
) -> bytes:
    """Return the UTF-8 encoded CSV time sheet for ``registers``.

    Parameters
    ----------
    registers
        Registers in the order they should appear, normally ascending by
        ``clock_in``.
    subject
        Name and email repeated on every row.
    tz
        Zone used to render dates and times.

    Returns
    -------
    bytes
        Header row, one row per register and, when at least one register
        was given, a closing ``Total:`` row in the hours column. Open
        registers count as zero towards the total.

    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    total = dt.timedelta(0)
    seen = False
    for register in registers:
        writer.writerow(_row(register, subject, tz))
        total += worked_time(register)
        seen = True
    if seen:
        writer.writerow(["", "", "", "", "", f"Total: {format_duration(total)}", ""])
    return buffer.getvalue().encode("utf-8")
