"""Report job records: identity, lifecycle status, progress and result."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum
import uuid

from sqlalchemy import (
    CheckConstraint,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from punchclock.common.storage import Base, UTCDateTime
from punchclock.common.time import utcnow


class ReportStatus(enum.StrEnum):
    """Lifecycle states of a report job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


def new_process_id() -> str:
    """Return a fresh public process token (a random UUID4 string)."""
    return str(uuid.uuid4())


class Report(Base):
    """A requested time-sheet export and the state of its generation job.

    ``id`` is the internal key handed to the job queue; ``process_id`` is
    the public token clients poll with.
    """

    __tablename__ = "reports"
    __table_args__ = (
        Index("uq_reports_process_id", "process_id", unique=True),
        Index("ix_reports_status", "status"),
        Index("ix_reports_user_created_at", "user_id", "created_at"),
        CheckConstraint(
            "progress >= 0 AND progress <= 100",
            name="ck_reports_progress_bounds",
        ),
        CheckConstraint("end_date >= start_date", name="ck_reports_date_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    process_id: Mapped[str] = mapped_column(
        String(36), default=new_process_id, nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[ReportStatus] = mapped_column(
        Enum(
            ReportStatus,
            native_enum=False,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
            length=16,
        ),
        default=ReportStatus.QUEUED,
        nullable=False,
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date(), nullable=False)
    end_date: Mapped[dt.date] = mapped_column(Date(), nullable=False)
    file_path: Mapped[str | None] = mapped_column(String(1024), default=None)
    error_message: Mapped[str | None] = mapped_column(Text(), default=None)
    created_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False
    )

    @property
    def is_terminal(self) -> bool:
        """Return True once the job has completed or failed."""
        return self.status in {ReportStatus.COMPLETED, ReportStatus.FAILED}
