"""Time register resources: CRUD plus clock-in/clock-out actions.

Routes
------
``POST /time_registers``, ``GET /time_registers``
``GET/PUT/DELETE /time_registers/{register_id}``
``POST /users/{user_id}/clock_in``, ``POST /users/{user_id}/clock_out``

"""

from __future__ import annotations

import typing as typ

import falcon
import msgspec

from punchclock.api.bodies import ClockBody, TimeRegisterBody, decode_body
from punchclock.errors import ValidationError
from punchclock.registers.errors import MissingClockInError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from punchclock.registers.service import TimeRegisterService
    from punchclock.registers.storage import TimeRegister

__all__ = [
    "ClockInResource",
    "ClockOutResource",
    "TimeRegisterCollectionResource",
    "TimeRegisterItemResource",
    "serialize_register",
]


def serialize_register(register: TimeRegister) -> dict[str, typ.Any]:
    """Serialize a ``TimeRegister`` to a JSON-compatible dict."""
    return {
        "id": register.id,
        "user_id": register.user_id,
        "clock_in": register.clock_in.isoformat(),
        "clock_out": (
            register.clock_out.isoformat() if register.clock_out is not None else None
        ),
        "open": register.is_open,
        "created_at": register.created_at.isoformat(),
        "updated_at": register.updated_at.isoformat(),
    }


class TimeRegisterCollectionResource:
    """``/time_registers``: list all registers or create one."""

    def __init__(self, register_service: TimeRegisterService) -> None:
        """Configure the resource with the register service."""
        self._registers = register_service

    async def on_get(self, _req: Request, resp: Response) -> None:
        """List every register ordered by clock-in time."""
        registers = await self._registers.list_all()
        resp.media = [serialize_register(register) for register in registers]
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response) -> None:
        """Create a register; omitting ``clock_out`` leaves it open."""
        body = await decode_body(req, TimeRegisterBody)
        if body.user_id is msgspec.UNSET:
            msg = "user_id is required"
            raise ValidationError(msg, field="user_id")
        if body.clock_in is msgspec.UNSET:
            raise MissingClockInError
        clock_out = None if body.clock_out is msgspec.UNSET else body.clock_out
        register = await self._registers.create(
            user_id=body.user_id, clock_in=body.clock_in, clock_out=clock_out
        )
        resp.media = serialize_register(register)
        resp.status = falcon.HTTP_201


class TimeRegisterItemResource:
    """``/time_registers/{register_id}``: show, update or delete."""

    def __init__(self, register_service: TimeRegisterService) -> None:
        """Configure the resource with the register service."""
        self._registers = register_service

    async def on_get(self, _req: Request, resp: Response, *, register_id: int) -> None:
        """Return one register."""
        register = await self._registers.get(register_id)
        resp.media = serialize_register(register)
        resp.status = falcon.HTTP_200

    async def on_put(self, req: Request, resp: Response, *, register_id: int) -> None:
        """Apply the fields present in the body; absent fields are kept."""
        body = await decode_body(req, TimeRegisterBody)
        register = await self._registers.update(
            register_id,
            user_id=body.user_id,
            clock_in=body.clock_in,
            clock_out=body.clock_out,
        )
        resp.media = serialize_register(register)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, _req: Request, resp: Response, *, register_id: int
    ) -> None:
        """Delete one register."""
        await self._registers.delete(register_id)
        resp.status = falcon.HTTP_204


class ClockInResource:
    """``POST /users/{user_id}/clock_in`` opens a register."""

    def __init__(self, register_service: TimeRegisterService) -> None:
        """Configure the resource with the register service."""
        self._registers = register_service

    async def on_post(self, req: Request, resp: Response, *, user_id: int) -> None:
        """Open a register at ``at`` or now."""
        body = await decode_body(req, ClockBody)
        register = await self._registers.clock_in(user_id, at=body.at)
        resp.media = serialize_register(register)
        resp.status = falcon.HTTP_201


class ClockOutResource:
    """``POST /users/{user_id}/clock_out`` closes the open register."""

    def __init__(self, register_service: TimeRegisterService) -> None:
        """Configure the resource with the register service."""
        self._registers = register_service

    async def on_post(self, req: Request, resp: Response, *, user_id: int) -> None:
        """Close the user's open register at ``at`` or now."""
        body = await decode_body(req, ClockBody)
        register = await self._registers.clock_out(user_id, at=body.at)
        resp.media = serialize_register(register)
        resp.status = falcon.HTTP_200
