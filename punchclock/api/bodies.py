"""Request body schemas and decoding for the JSON API.

Bodies are decoded straight into msgspec Structs. Field values the domain
services validate themselves (dates, names) are typed loosely here so the
service can report the domain-specific message.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import typing as typ

import msgspec

from punchclock.api.errors import InvalidInputError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request


class ReportRequestBody(msgspec.Struct, kw_only=True):
    """Body of ``POST /users/{user_id}/reports``."""

    start_date: object | None = None
    end_date: object | None = None


class UserBody(msgspec.Struct, kw_only=True):
    """Body of user create and update requests."""

    name: str | None | msgspec.UnsetType = msgspec.UNSET
    email: str | None | msgspec.UnsetType = msgspec.UNSET


class TimeRegisterBody(msgspec.Struct, kw_only=True):
    """Body of time register create and update requests.

    Timestamps are RFC 3339 strings and must carry an offset.
    """

    user_id: int | msgspec.UnsetType = msgspec.UNSET
    clock_in: dt.datetime | None | msgspec.UnsetType = msgspec.UNSET
    clock_out: dt.datetime | None | msgspec.UnsetType = msgspec.UNSET


class ClockBody(msgspec.Struct, kw_only=True):
    """Optional body of the clock-in and clock-out actions."""

    at: dt.datetime | None = None


async def decode_body[T](req: Request, schema: type[T]) -> T:
    """Decode the request body into ``schema``.

    An empty body decodes as ``{}``.

    Raises
    ------
    InvalidInputError
        If the body is not valid JSON or does not match ``schema``.

    """
    raw = await req.stream.read()
    try:
        return msgspec.json.decode(raw or b"{}", type=schema)
    except msgspec.ValidationError as exc:
        raise InvalidInputError(str(exc)) from exc
    except msgspec.DecodeError as exc:
        msg = "Request body must be a JSON object"
        raise InvalidInputError(msg) from exc
