"""Time register table and its storage-level invariants.

Two rules are enforced by the schema itself, in addition to the checks in
:mod:`punchclock.registers.service`:

* ``ck_time_registers_clock_order``: a closed register ends strictly after
  it starts.
* ``uq_time_registers_one_open_per_user``: a partial unique index on
  ``user_id`` over rows whose ``clock_out`` is ``NULL``. Two concurrent
  clock-ins for the same user can both pass the application check; only
  one of them can commit.
"""

from __future__ import annotations

import datetime as dt  # noqa: TC003

from sqlalchemy import CheckConstraint, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from punchclock.common.storage import Base, UTCDateTime
from punchclock.common.time import utcnow

OPEN_REGISTER_INDEX = "uq_time_registers_one_open_per_user"

_OPEN_PREDICATE = text("clock_out IS NULL")


class TimeRegister(Base):
    """One clock-in/clock-out interval for a user."""

    __tablename__ = "time_registers"
    __table_args__ = (
        Index(
            OPEN_REGISTER_INDEX,
            "user_id",
            unique=True,
            postgresql_where=_OPEN_PREDICATE,
            sqlite_where=_OPEN_PREDICATE,
        ),
        Index("ix_time_registers_user_clock_in", "user_id", "clock_in"),
        CheckConstraint(
            "clock_out IS NULL OR clock_out > clock_in",
            name="ck_time_registers_clock_order",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    clock_in: Mapped[dt.datetime] = mapped_column(UTCDateTime(), nullable=False)
    clock_out: Mapped[dt.datetime | None] = mapped_column(UTCDateTime(), default=None)
    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def is_open(self) -> bool:
        """Return True while the register has no ``clock_out``."""
        return self.clock_out is None
