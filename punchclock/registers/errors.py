"""Errors raised by the time register store."""

from __future__ import annotations

from punchclock.errors import NotFoundError, ValidationError


class OpenRegisterConflictError(ValidationError):
    """Raised when a user would end up with two open registers."""

    rule = "open_register_exists"

    def __init__(self, user_id: int) -> None:
        """Initialize with the user that already has an open register."""
        self.user_id = user_id
        super().__init__("User already has an open time register")


class ClockOutBeforeClockInError(ValidationError):
    """Raised when ``clock_out`` is not strictly after ``clock_in``."""

    rule = "clock_out_not_after_clock_in"

    def __init__(self) -> None:
        """Build the fixed error message."""
        super().__init__("clock_out must be after clock in time", field="clock_out")


class MissingClockInError(ValidationError):
    """Raised when a register has no ``clock_in``."""

    rule = "missing_clock_in"

    def __init__(self) -> None:
        """Build the fixed error message."""
        super().__init__("clock_in can't be blank", field="clock_in")


class NaiveTimestampError(ValidationError):
    """Raised when a timestamp carries no timezone information."""

    rule = "naive_timestamp"

    def __init__(self, field: str) -> None:
        """Initialize with the name of the naive field."""
        super().__init__(f"{field} must include timezone information", field=field)


class NoOpenRegisterError(ValidationError):
    """Raised on clock-out when the user has no open register."""

    rule = "no_open_register"

    def __init__(self, user_id: int) -> None:
        """Initialize with the user that has nothing to close."""
        self.user_id = user_id
        super().__init__("User has no open time register")


class TimeRegisterNotFoundError(NotFoundError):
    """Raised when a register id does not exist."""

    def __init__(self, register_id: int) -> None:
        """Initialize with the missing register id."""
        self.register_id = register_id
        super().__init__("Time register not found")
