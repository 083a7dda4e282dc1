"""Error taxonomy shared by the Punchclock domain packages.

Each domain package (``staff``, ``registers``, ``reporting``) raises
subclasses of these bases; the API layer maps the bases, not the leaves, to
HTTP responses.
"""

from __future__ import annotations


class PunchclockError(Exception):
    """Base class for all Punchclock domain errors."""


class ValidationError(PunchclockError):
    """Input rejected by a domain rule.

    Attributes
    ----------
    rule
        Stable machine-readable identifier of the rule that failed, e.g.
        ``"end_before_start"``.
    field
        Name of the offending input field, when a single field is at fault.

    """

    rule: str = "invalid"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with a human-readable message and optional field."""
        self.field = field
        super().__init__(message)


class NotFoundError(PunchclockError):
    """A referenced record (or stored artifact) does not exist."""


class NotReadyError(PunchclockError):
    """The requested resource exists but is not in a usable state yet.

    Attributes
    ----------
    status
        Current state of the resource, to guide the caller.

    """

    def __init__(self, message: str, *, status: str) -> None:
        """Initialize with a message and the resource's current status."""
        self.status = status
        super().__init__(message)


class GenerationFailure(PunchclockError):
    """A background generation task failed after recording its failure."""


__all__ = [
    "GenerationFailure",
    "NotFoundError",
    "NotReadyError",
    "PunchclockError",
    "ValidationError",
]
