"""Allowed report status transitions and the helper that applies them.

The graph is::

    queued -> processing -> completed
                         -> failed

``completed`` and ``failed`` have no outgoing edges. Progress may change
without a status change while the report is ``processing``.
"""

from __future__ import annotations

import typing as typ

from punchclock.reporting.errors import InvalidReportTransitionError
from punchclock.reporting.storage import ReportStatus

if typ.TYPE_CHECKING:
    from punchclock.reporting.storage import Report

ALLOWED_TRANSITIONS: typ.Final[typ.Mapping[ReportStatus, frozenset[ReportStatus]]] = {
    ReportStatus.QUEUED: frozenset({ReportStatus.PROCESSING}),
    ReportStatus.PROCESSING: frozenset(
        {ReportStatus.PROCESSING, ReportStatus.COMPLETED, ReportStatus.FAILED}
    ),
    ReportStatus.COMPLETED: frozenset(),
    ReportStatus.FAILED: frozenset(),
}

_KEEP: typ.Final = object()


def can_transition(current: ReportStatus, target: ReportStatus) -> bool:
    """Return True when ``current -> target`` is an edge of the lifecycle."""
    return target in ALLOWED_TRANSITIONS[current]


def advance_report(
    report: Report,
    target: ReportStatus,
    *,
    progress: int,
    file_path: str | None | object = _KEEP,
    error_message: str | None | object = _KEEP,
) -> Report:
    """Move ``report`` to ``target`` and record progress on the instance.

    The caller owns the session and commits the change. ``file_path`` and
    ``error_message`` keep their stored value unless passed explicitly.

    Raises
    ------
    InvalidReportTransitionError
        If the lifecycle has no ``report.status -> target`` edge.
    ValueError
        If ``progress`` is outside ``0..100``.

    """
    current = ReportStatus(report.status)
    if not can_transition(current, target):
        raise InvalidReportTransitionError(current, target)
    if not 0 <= progress <= 100:  # noqa: PLR2004
        msg = f"progress must be within 0..100, got: {progress}"
        raise ValueError(msg)
    report.status = target
    report.progress = progress
    if file_path is not _KEEP:
        report.file_path = typ.cast("str | None", file_path)
    if error_message is not _KEEP:
        report.error_message = typ.cast("str | None", error_message)
    return report
