"""Helpers for building users, registers and reports in tests."""

from __future__ import annotations

import datetime as dt
import typing as typ

from punchclock.registers.service import TimeRegisterService
from punchclock.staff.service import StaffService

if typ.TYPE_CHECKING:
    from punchclock.common.db import SessionFactory
    from punchclock.registers.storage import TimeRegister
    from punchclock.staff.storage import User


def at(day: dt.date, hour: int, minute: int = 0) -> dt.datetime:
    """Return a UTC instant on ``day`` at ``hour:minute``."""
    return dt.datetime.combine(day, dt.time(hour, minute), tzinfo=dt.UTC)


async def make_user(
    session_factory: SessionFactory,
    name: str = "Ana Souza",
    email: str = "ana@example.com",
) -> User:
    """Create and return a user."""
    return await StaffService(session_factory).create(name=name, email=email)


async def make_register(
    session_factory: SessionFactory,
    user_id: int,
    clock_in: dt.datetime,
    clock_out: dt.datetime | None = None,
) -> TimeRegister:
    """Create and return a time register."""
    return await TimeRegisterService(session_factory).create(
        user_id=user_id, clock_in=clock_in, clock_out=clock_out
    )


class RecordingQueue:
    """Enqueue callable that remembers the ids it received."""

    def __init__(self) -> None:
        self.report_ids: list[int] = []

    def __call__(self, report_id: int) -> None:
        self.report_ids.append(report_id)


class FakeLogger:
    """Collects femtologging-style log calls for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, object | None, bool]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        self.calls.append((level, message, exc_info, stack_info))
        return message
