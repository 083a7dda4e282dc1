"""Configuration for report generation.

Usage
-----
Create a configuration with defaults:

>>> config = ReportingConfig()
>>> config.report_dir
PosixPath('tmp/reports')

Or load from environment variables:

>>> import os
>>> os.environ["PUNCHCLOCK_REPORT_TIMEZONE"] = "America/Sao_Paulo"
>>> ReportingConfig.from_env().timezone
'America/Sao_Paulo'

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

from punchclock.common.time import resolve_timezone

DEFAULT_REPORT_DIR = Path("tmp/reports")
DEFAULT_TIMEZONE = "UTC"


@dc.dataclass(frozen=True, slots=True)
class ReportingConfig:
    """Settings used by the report executor.

    Attributes
    ----------
    report_dir
        Directory where generated CSV artifacts are stored. Created on
        first write. Default is ``tmp/reports``.
    timezone
        IANA zone name used both to turn the requested calendar dates into
        an inclusive instant window and to render times in the CSV.
        Default is ``UTC``.

    """

    report_dir: Path = DEFAULT_REPORT_DIR
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        """Reject unknown time zone names early."""
        resolve_timezone(self.timezone)

    @classmethod
    def from_env(cls) -> ReportingConfig:
        """Create configuration from environment variables.

        Reads ``PUNCHCLOCK_REPORT_DIR`` and ``PUNCHCLOCK_REPORT_TIMEZONE``;
        blank values fall back to the defaults.

        Raises
        ------
        ValueError
            If ``PUNCHCLOCK_REPORT_TIMEZONE`` names an unknown zone.

        """
        raw_dir = os.environ.get("PUNCHCLOCK_REPORT_DIR", "").strip()
        raw_zone = os.environ.get("PUNCHCLOCK_REPORT_TIMEZONE", "").strip()
        return cls(
            report_dir=Path(raw_dir) if raw_dir else DEFAULT_REPORT_DIR,
            timezone=raw_zone or DEFAULT_TIMEZONE,
        )
