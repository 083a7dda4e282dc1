"""Errors raised by the staff directory."""

from __future__ import annotations

from punchclock.errors import NotFoundError, ValidationError


class UserNotFoundError(NotFoundError, ValidationError):
    """Raised when a user id does not reference an existing user.

    It is a ``NotFoundError`` for lookups and a ``ValidationError`` when the
    id arrives as part of another record's input (a report request or a
    time register). ``NotFoundError`` comes first so HTTP handlers answer
    404.
    """

    rule = "unknown_user"

    def __init__(self, user_id: object) -> None:
        """Initialize with the offending user id."""
        self.user_id = user_id
        super().__init__("User not found", field="user_id")


class InvalidUserError(ValidationError):
    """Raised when user fields fail presence or format checks."""

    rule = "invalid_user"


class DuplicateEmailError(ValidationError):
    """Raised when another user already owns the email address."""

    rule = "duplicate_email"

    def __init__(self, email: str) -> None:
        """Initialize with the conflicting address."""
        self.email = email
        super().__init__("email has already been taken", field="email")
