"""Staff directory service: create, look up and remove users.

Users are plain records; the interesting rules live in the registers and
reporting packages, which only need :meth:`StaffService.require` to resolve
a user id.
"""

from __future__ import annotations

import re
import typing as typ

import msgspec
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from punchclock.logging import get_logger, log_info
from punchclock.staff.errors import (
    DuplicateEmailError,
    InvalidUserError,
    UserNotFoundError,
)
from punchclock.staff.storage import User

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from punchclock.common.db import SessionFactory

logger = get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_fields(name: str | None, email: str | None) -> tuple[str, str]:
    clean_name = (name or "").strip()
    clean_email = (email or "").strip()
    if not clean_name:
        msg = "name can't be blank"
        raise InvalidUserError(msg, field="name")
    if not clean_email:
        msg = "email can't be blank"
        raise InvalidUserError(msg, field="email")
    if _EMAIL_PATTERN.match(clean_email) is None:
        msg = "email is invalid"
        raise InvalidUserError(msg, field="email")
    return clean_name, clean_email


async def load_user(session: AsyncSession, user_id: int) -> User:
    """Return the user with ``user_id`` within ``session``.

    Raises
    ------
    UserNotFoundError
        If no such user exists.

    """
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


class StaffService:
    """CRUD operations for :class:`~punchclock.staff.storage.User`."""

    def __init__(self, session_factory: SessionFactory) -> None:
        """Bind the service to a session factory."""
        self._session_factory = session_factory

    async def create(self, *, name: str | None, email: str | None) -> User:
        """Create a user.

        Raises
        ------
        InvalidUserError
            If name or email is blank, or the email is malformed.
        DuplicateEmailError
            If the email already belongs to another user.

        """
        clean_name, clean_email = _clean_fields(name, email)
        try:
            async with self._session_factory() as session, session.begin():
                user = User(name=clean_name, email=clean_email)
                session.add(user)
                await session.flush()
        except IntegrityError as exc:
            raise DuplicateEmailError(clean_email) from exc
        log_info(logger, "Created user %s", user.id)
        return user

    async def require(self, user_id: int) -> User:
        """Return the user or raise :class:`UserNotFoundError`."""
        async with self._session_factory() as session:
            return await load_user(session, user_id)

    async def list_all(self) -> list[User]:
        """Return all users ordered by id."""
        async with self._session_factory() as session:
            return list((await session.scalars(select(User).order_by(User.id))).all())

    async def update(
        self,
        user_id: int,
        *,
        name: str | None | msgspec.UnsetType = msgspec.UNSET,
        email: str | None | msgspec.UnsetType = msgspec.UNSET,
    ) -> User:
        """Change a user's name and/or email; omitted fields are kept.

        Raises
        ------
        UserNotFoundError
            If no such user exists.
        InvalidUserError
            If the resulting name or email is invalid.
        DuplicateEmailError
            If the new email already belongs to another user.

        """
        try:
            async with self._session_factory() as session, session.begin():
                user = await load_user(session, user_id)
                clean_name, clean_email = _clean_fields(
                    user.name if name is msgspec.UNSET else name,
                    user.email if email is msgspec.UNSET else email,
                )
                user.name = clean_name
                user.email = clean_email
                await session.flush()
        except IntegrityError as exc:
            raise DuplicateEmailError(typ.cast("str", email)) from exc
        log_info(logger, "Updated user %s", user_id)
        return user

    async def delete(self, user_id: int) -> None:
        """Delete a user together with its registers and reports."""
        async with self._session_factory() as session, session.begin():
            user = await load_user(session, user_id)
            await session.delete(user)
        log_info(logger, "Deleted user %s", user_id)
