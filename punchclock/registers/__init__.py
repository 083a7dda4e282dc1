"""Time register store: clock-in/clock-out intervals per user.

Public API
----------
TimeRegister
    Mapped table with the partial unique index that allows one open
    register per user.
TimeRegisterService
    Create, update, close and delete registers with invariant checks.
fetch_registers_in_window
    Ordered query used by report generation.
"""

from __future__ import annotations

from .errors import (
    ClockOutBeforeClockInError,
    MissingClockInError,
    NaiveTimestampError,
    NoOpenRegisterError,
    OpenRegisterConflictError,
    TimeRegisterNotFoundError,
)
from .service import (
    UNSET,
    TimeRegisterService,
    ensure_single_open_register,
    fetch_registers_in_window,
    validate_interval,
)
from .storage import OPEN_REGISTER_INDEX, TimeRegister

__all__ = [
    "OPEN_REGISTER_INDEX",
    "UNSET",
    "ClockOutBeforeClockInError",
    "MissingClockInError",
    "NaiveTimestampError",
    "NoOpenRegisterError",
    "OpenRegisterConflictError",
    "TimeRegister",
    "TimeRegisterNotFoundError",
    "TimeRegisterService",
    "ensure_single_open_register",
    "fetch_registers_in_window",
    "validate_interval",
]
