"""Unit tests for shared time helpers."""

from __future__ import annotations

import datetime as dt
import zoneinfo

import pytest

from punchclock.common.time import day_span, resolve_timezone, utcnow


def test_utcnow_is_timezone_aware() -> None:
    """utcnow returns an aware UTC timestamp."""
    assert utcnow().tzinfo is dt.UTC


class TestResolveTimezone:
    """Tests for resolve_timezone."""

    def test_utc_maps_to_datetime_utc(self) -> None:
        """'UTC' resolves to the stdlib UTC singleton regardless of case."""
        assert resolve_timezone("utc") is dt.UTC

    def test_iana_name_resolves_to_zoneinfo(self) -> None:
        """IANA names resolve to ZoneInfo instances."""
        zone = resolve_timezone("America/Sao_Paulo")
        assert zone == zoneinfo.ZoneInfo("America/Sao_Paulo")

    def test_unknown_zone_raises_value_error(self) -> None:
        """Unknown names raise ValueError naming the input."""
        with pytest.raises(ValueError, match="Unknown timezone"):
            resolve_timezone("Mars/Olympus_Mons")


class TestDaySpan:
    """Tests for day_span."""

    def test_span_covers_whole_days_inclusive(self) -> None:
        """The span runs from midnight of the first day to the last microsecond."""
        start, end = day_span(dt.date(2025, 9, 1), dt.date(2025, 9, 2), dt.UTC)

        assert start == dt.datetime(2025, 9, 1, tzinfo=dt.UTC)
        assert end == dt.datetime(2025, 9, 2, 23, 59, 59, 999999, tzinfo=dt.UTC)

    def test_span_uses_the_given_zone(self) -> None:
        """Boundaries are local midnights in the requested zone."""
        zone = zoneinfo.ZoneInfo("America/Sao_Paulo")
        start, _end = day_span(dt.date(2025, 9, 1), dt.date(2025, 9, 1), zone)

        assert start.astimezone(dt.UTC) == dt.datetime(2025, 9, 1, 3, tzinfo=dt.UTC)
