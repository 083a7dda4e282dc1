"""User table: the people whose time is tracked and reported."""

from __future__ import annotations

import datetime as dt  # noqa: TC003

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from punchclock.common.storage import Base, UTCDateTime
from punchclock.common.time import utcnow


class User(Base):
    """An employee who clocks in and out.

    Time registers and reports reference users with ``ON DELETE CASCADE``;
    deleting a user removes them at the database level.
    """

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False
    )
