"""Falcon error handlers mapping domain errors to JSON responses.

Handlers are registered against the error bases from
:mod:`punchclock.errors`; Falcon picks the handler of the nearest class in
the raised error's MRO, so leaf errors need no registration of their own.

Usage
-----
Register error handlers on the Falcon app::

    from punchclock.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from punchclock.errors import NotFoundError, NotReadyError, ValidationError

if typ.TYPE_CHECKING:
    from falcon.asgi import App, Request, Response

__all__ = [
    "InvalidInputError",
    "handle_invalid_input",
    "handle_not_found",
    "handle_not_ready",
    "handle_validation_error",
    "register_error_handlers",
]


class InvalidInputError(Exception):
    """Raised for malformed request bodies that should map to HTTP 400.

    Use this instead of ``ValueError`` so that only *intentional*
    input failures are surfaced to the caller, while genuine programmer
    mistakes still propagate as unhandled 500s.

    Attributes
    ----------
    reason
        Human-readable description of the failure.
    field
        Optional name of the input field that failed to decode.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Invalid input",
        "description": ex.reason,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_validation_error(
    _req: Request,
    resp: Response,
    ex: ValidationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a domain ``ValidationError`` to an HTTP 400 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The rejected-input error carrying ``rule`` and optional ``field``.
    _params
        URI template parameters (unused).

    """
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {
        "title": "Validation failed",
        "description": str(ex),
        "rule": ex.rule,
    }
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_not_found(
    _req: Request,
    resp: Response,
    ex: NotFoundError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NotFoundError`` to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = {
        "title": "Not found",
        "description": str(ex),
    }


async def handle_not_ready(
    _req: Request,
    resp: Response,
    ex: NotReadyError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``NotReadyError`` to an HTTP 422 JSON response with the status."""
    resp.status = falcon.HTTP_422
    resp.media = {
        "title": "Not ready",
        "description": str(ex),
        "status": ex.status,
    }


def register_error_handlers(app: App) -> None:
    """Install the domain error handlers on ``app``."""
    app.add_error_handler(ValidationError, handle_validation_error)
    app.add_error_handler(NotFoundError, handle_not_found)
    app.add_error_handler(NotReadyError, handle_not_ready)
    app.add_error_handler(InvalidInputError, handle_invalid_input)
