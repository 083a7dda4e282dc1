"""Common time utilities."""

from __future__ import annotations

import datetime as dt
import zoneinfo


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp suitable for DB defaults."""
    return dt.datetime.now(dt.UTC)


def resolve_timezone(name: str) -> dt.tzinfo:
    """Return the tzinfo for an IANA zone name, treating ``UTC`` specially.

    Raises
    ------
    ValueError
        If ``name`` is not a known zone.

    """
    if name.strip().upper() == "UTC":
        return dt.UTC
    try:
        return zoneinfo.ZoneInfo(name.strip())
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"Unknown timezone: {name!r}"
        raise ValueError(msg) from exc


def day_span(
    start_date: dt.date,
    end_date: dt.date,
    tz: dt.tzinfo,
) -> tuple[dt.datetime, dt.datetime]:
    """Return the inclusive instant range covering whole calendar days.

    The range runs from midnight of ``start_date`` to the last representable
    instant of ``end_date`` (``23:59:59.999999``) in ``tz``.

    Examples
    --------
    >>> start, end = day_span(dt.date(2025, 9, 1), dt.date(2025, 9, 2), dt.UTC)
    >>> start.isoformat(), end.isoformat()
    ('2025-09-01T00:00:00+00:00', '2025-09-02T23:59:59.999999+00:00')

    """
    start = dt.datetime.combine(start_date, dt.time.min, tzinfo=tz)
    end = dt.datetime.combine(end_date, dt.time.max, tzinfo=tz)
    return start, end
