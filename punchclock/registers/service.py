"""Time register store with single-open-register enforcement.

Every write that could leave a register open runs a check-then-act
validation inside its transaction: it looks for another open register of
the same user (excluding the row being edited) before flushing. The partial
unique index declared in :mod:`punchclock.registers.storage` backs that
check, so a write that loses a race surfaces here as an ``IntegrityError``
and is translated into the same :class:`OpenRegisterConflictError` the
check would have raised.

Usage
-----
>>> service = TimeRegisterService(session_factory)
>>> register = await service.clock_in(user_id)
>>> await service.clock_out(user_id)

"""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from punchclock.common.time import utcnow
from punchclock.logging import get_logger, log_info, log_warning
from punchclock.registers.errors import (
    ClockOutBeforeClockInError,
    MissingClockInError,
    NaiveTimestampError,
    NoOpenRegisterError,
    OpenRegisterConflictError,
    TimeRegisterNotFoundError,
)
from punchclock.registers.storage import OPEN_REGISTER_INDEX, TimeRegister
from punchclock.staff.errors import UserNotFoundError
from punchclock.staff.service import load_user

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from punchclock.common.db import SessionFactory

logger = get_logger(__name__)

UNSET = msgspec.UNSET
type Maybe[T] = T | msgspec.UnsetType


def validate_interval(
    clock_in: dt.datetime | None,
    clock_out: dt.datetime | None,
) -> None:
    """Reject intervals without a start, with naive stamps, or ending early.

    Raises
    ------
    MissingClockInError
        If ``clock_in`` is absent.
    NaiveTimestampError
        If either timestamp has no tzinfo.
    ClockOutBeforeClockInError
        If ``clock_out`` is present and not strictly after ``clock_in``.

    """
    if clock_in is None:
        raise MissingClockInError
    if clock_in.tzinfo is None:
        raise NaiveTimestampError("clock_in")
    if clock_out is None:
        return
    if clock_out.tzinfo is None:
        raise NaiveTimestampError("clock_out")
    if clock_out <= clock_in:
        raise ClockOutBeforeClockInError


async def ensure_single_open_register(
    session: AsyncSession,
    user_id: int,
    *,
    exclude_id: int | None = None,
) -> None:
    """Raise if ``user_id`` already has an open register other than ``exclude_id``.

    Raises
    ------
    OpenRegisterConflictError
        If another open register exists for the user.

    """
    stmt = select(TimeRegister.id).where(
        TimeRegister.user_id == user_id,
        TimeRegister.clock_out.is_(None),
    )
    if exclude_id is not None:
        stmt = stmt.where(TimeRegister.id != exclude_id)
    if await session.scalar(stmt.limit(1)) is not None:
        raise OpenRegisterConflictError(user_id)


def _translate_integrity_error(exc: IntegrityError, user_id: int) -> Exception | None:
    """Map a constraint violation to the domain error it stands for."""
    message = str(exc.orig)
    if OPEN_REGISTER_INDEX in message or "time_registers.user_id" in message:
        return OpenRegisterConflictError(user_id)
    if "ck_time_registers_clock_order" in message:
        return ClockOutBeforeClockInError()
    if "foreign key" in message.lower():
        return UserNotFoundError(user_id)
    return None


class TimeRegisterService:
    """Create, edit, close and delete time registers."""

    def __init__(self, session_factory: SessionFactory) -> None:
        """Bind the service to a session factory."""
        self._session_factory = session_factory

    async def _write(
        self,
        user_id: int,
        mutate: typ.Callable[[AsyncSession], typ.Awaitable[TimeRegister]],
    ) -> TimeRegister:
        """Run ``mutate`` in a transaction, translating constraint violations."""
        try:
            async with self._session_factory() as session, session.begin():
                register = await mutate(session)
                await session.flush()
        except IntegrityError as exc:
            translated = _translate_integrity_error(exc, user_id)
            if translated is None:
                raise
            log_warning(
                logger,
                "Rejected time register write for user %s at commit: %s",
                user_id,
                translated,
            )
            raise translated from exc
        return register

    async def create(
        self,
        *,
        user_id: int,
        clock_in: dt.datetime | None,
        clock_out: dt.datetime | None = None,
    ) -> TimeRegister:
        """Create a register; it is open when ``clock_out`` is ``None``.

        Raises
        ------
        UserNotFoundError
            If ``user_id`` does not exist.
        OpenRegisterConflictError
            If the register would be open and the user already has one.
        ClockOutBeforeClockInError
            If ``clock_out`` is not after ``clock_in``.

        """
        validate_interval(clock_in, clock_out)

        async def mutate(session: AsyncSession) -> TimeRegister:
            await load_user(session, user_id)
            if clock_out is None:
                await ensure_single_open_register(session, user_id)
            register = TimeRegister(
                user_id=user_id, clock_in=clock_in, clock_out=clock_out
            )
            session.add(register)
            return register

        register = await self._write(user_id, mutate)
        log_info(logger, "Created time register %s for user %s", register.id, user_id)
        return register

    async def update(
        self,
        register_id: int,
        *,
        user_id: Maybe[int] = UNSET,
        clock_in: Maybe[dt.datetime | None] = UNSET,
        clock_out: Maybe[dt.datetime | None] = UNSET,
    ) -> TimeRegister:
        """Apply the provided fields to an existing register.

        Fields left as ``UNSET`` keep their stored value; an explicit
        ``clock_out=None`` reopens the register, which is subject to the
        single-open rule like any other open write.
        """
        async with self._session_factory() as session:
            current = await self._load(session, register_id)
        target_user = current.user_id if user_id is UNSET else user_id
        new_in = current.clock_in if clock_in is UNSET else clock_in
        new_out = current.clock_out if clock_out is UNSET else clock_out
        validate_interval(new_in, new_out)

        async def mutate(session: AsyncSession) -> TimeRegister:
            register = await self._load(session, register_id)
            if target_user != register.user_id:
                await load_user(session, target_user)
            if new_out is None:
                await ensure_single_open_register(
                    session, target_user, exclude_id=register.id
                )
            register.user_id = target_user
            register.clock_in = typ.cast("dt.datetime", new_in)
            register.clock_out = new_out
            return register

        return await self._write(target_user, mutate)

    async def clock_in(
        self, user_id: int, *, at: dt.datetime | None = None
    ) -> TimeRegister:
        """Open a new register for ``user_id`` starting at ``at`` (default now)."""
        return await self.create(user_id=user_id, clock_in=at or utcnow())

    async def clock_out(
        self, user_id: int, *, at: dt.datetime | None = None
    ) -> TimeRegister:
        """Close the user's open register at ``at`` (default now).

        Raises
        ------
        NoOpenRegisterError
            If the user has no open register.

        """
        closing_at = at or utcnow()

        async def mutate(session: AsyncSession) -> TimeRegister:
            await load_user(session, user_id)
            register = await session.scalar(
                select(TimeRegister).where(
                    TimeRegister.user_id == user_id,
                    TimeRegister.clock_out.is_(None),
                )
            )
            if register is None:
                raise NoOpenRegisterError(user_id)
            validate_interval(register.clock_in, closing_at)
            register.clock_out = closing_at
            return register

        register = await self._write(user_id, mutate)
        log_info(logger, "Closed time register %s for user %s", register.id, user_id)
        return register

    async def get(self, register_id: int) -> TimeRegister:
        """Return a register by id."""
        async with self._session_factory() as session:
            return await self._load(session, register_id)

    async def list_all(self) -> list[TimeRegister]:
        """Return every register ordered by ``clock_in``."""
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(TimeRegister).order_by(TimeRegister.clock_in, TimeRegister.id)
            )
            return list(rows.all())

    async def list_for_user(self, user_id: int) -> list[TimeRegister]:
        """Return a user's registers ordered by ``clock_in``."""
        async with self._session_factory() as session:
            await load_user(session, user_id)
            rows = await session.scalars(
                select(TimeRegister)
                .where(TimeRegister.user_id == user_id)
                .order_by(TimeRegister.clock_in, TimeRegister.id)
            )
            return list(rows.all())

    async def delete(self, register_id: int) -> None:
        """Delete a register by id."""
        async with self._session_factory() as session, session.begin():
            register = await self._load(session, register_id)
            await session.delete(register)
        log_info(logger, "Deleted time register %s", register_id)

    @staticmethod
    async def _load(session: AsyncSession, register_id: int) -> TimeRegister:
        register = await session.get(TimeRegister, register_id)
        if register is None:
            raise TimeRegisterNotFoundError(register_id)
        return register


async def fetch_registers_in_window(
    session: AsyncSession,
    user_id: int,
    start: dt.datetime,
    end: dt.datetime,
) -> list[TimeRegister]:
    """Return ``user_id``'s registers with ``start <= clock_in <= end``.

    Rows are ordered by ascending ``clock_in``; ties fall back to id so the
    order is stable between runs.
    """
    rows = await session.scalars(
        select(TimeRegister)
        .where(
            TimeRegister.user_id == user_id,
            TimeRegister.clock_in >= start,
            TimeRegister.clock_in <= end,
        )
        .order_by(TimeRegister.clock_in, TimeRegister.id)
    )
    return list(rows.all())
