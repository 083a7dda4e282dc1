"""Staff directory resources.

Routes
------
``POST /users``, ``GET /users``
``GET/PUT/DELETE /users/{user_id}``
``GET /users/{user_id}/time_registers``

"""

from __future__ import annotations

import typing as typ

import falcon

from punchclock.api.bodies import UserBody, decode_body
from punchclock.api.registers.resources import serialize_register

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from punchclock.registers.service import TimeRegisterService
    from punchclock.staff.service import StaffService
    from punchclock.staff.storage import User

__all__ = [
    "UserCollectionResource",
    "UserItemResource",
    "UserTimeRegistersResource",
    "serialize_user",
]


def serialize_user(user: User) -> dict[str, typ.Any]:
    """Serialize a ``User`` to a JSON-compatible dict."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "created_at": user.created_at.isoformat(),
        "updated_at": user.updated_at.isoformat(),
    }


class UserCollectionResource:
    """``/users``: list or create users."""

    def __init__(self, staff_service: StaffService) -> None:
        """Configure the resource with the staff service."""
        self._staff = staff_service

    async def on_get(self, _req: Request, resp: Response) -> None:
        """List all users."""
        users = await self._staff.list_all()
        resp.media = [serialize_user(user) for user in users]
        resp.status = falcon.HTTP_200

    async def on_post(self, req: Request, resp: Response) -> None:
        """Create a user from ``{name, email}``."""
        body = await decode_body(req, UserBody)
        user = await self._staff.create(
            name=body.name or None,
            email=body.email or None,
        )
        resp.media = serialize_user(user)
        resp.status = falcon.HTTP_201


class UserItemResource:
    """``/users/{user_id}``: show, update or delete a user."""

    def __init__(self, staff_service: StaffService) -> None:
        """Configure the resource with the staff service."""
        self._staff = staff_service

    async def on_get(self, _req: Request, resp: Response, *, user_id: int) -> None:
        """Return one user."""
        user = await self._staff.require(user_id)
        resp.media = serialize_user(user)
        resp.status = falcon.HTTP_200

    async def on_put(self, req: Request, resp: Response, *, user_id: int) -> None:
        """Update the fields present in the body."""
        body = await decode_body(req, UserBody)
        user = await self._staff.update(user_id, name=body.name, email=body.email)
        resp.media = serialize_user(user)
        resp.status = falcon.HTTP_200

    async def on_delete(self, _req: Request, resp: Response, *, user_id: int) -> None:
        """Delete a user with all registers and reports."""
        await self._staff.delete(user_id)
        resp.status = falcon.HTTP_204


class UserTimeRegistersResource:
    """``GET /users/{user_id}/time_registers`` lists one user's registers."""

    def __init__(self, register_service: TimeRegisterService) -> None:
        """Configure the resource with the register service."""
        self._registers = register_service

    async def on_get(self, _req: Request, resp: Response, *, user_id: int) -> None:
        """List the user's registers ordered by clock-in time."""
        registers = await self._registers.list_for_user(user_id)
        resp.media = [serialize_register(register) for register in registers]
        resp.status = falcon.HTTP_200
