"""Staff directory: users referenced by time registers and reports."""

from __future__ import annotations

from .errors import DuplicateEmailError, InvalidUserError, UserNotFoundError
from .service import StaffService, load_user
from .storage import User

__all__ = [
    "DuplicateEmailError",
    "InvalidUserError",
    "StaffService",
    "User",
    "UserNotFoundError",
    "load_user",
]
