"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import now_utc, today_utc, to_utc, parse_iso


class TestNowUtc:
    """Tests for now_utc()."""

    def test_is_utc(self):
        """Result must be timezone-aware UTC."""
        assert now_utc().tzinfo == timezone.utc

    def test_today_matches_now(self):
        assert isinstance(today_utc(), date)
        assert today_utc() == now_utc().date()


class TestToUtc:
    """Tests for to_utc()."""

    def test_raises_on_naive(self):
        """Naive datetime must raise ValueError."""
        with pytest.raises(ValueError, match="naive"):
            to_utc(datetime(2024, 1, 1, 12, 0, 0))

    def test_converts_other_timezone(self):
        """Chicago 12:00 in January should become UTC 18:00."""
        chicago = datetime(2024, 1, 1, 12, 0, 0, tzinfo=ZoneInfo("America/Chicago"))
        result = to_utc(chicago)
        assert result.tzinfo == timezone.utc
        assert result.hour == 18


class TestParseIso:
    """Tests for parse_iso()."""

    def test_handles_zulu(self):
        """ISO string with Z suffix should parse to UTC."""
        result = parse_iso("2024-01-01T12:00:00Z")
        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_handles_browser_timestamp(self):
        """Held order timestamps arrive with milliseconds and Z."""
        result = parse_iso("2025-03-14T09:26:53.589Z")
        assert result == datetime(2025, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc)

    def test_handles_offset(self):
        """12:00-06:00 is 18:00 UTC."""
        result = parse_iso("2024-01-01T12:00:00-06:00")
        assert result.tzinfo == timezone.utc
        assert result.hour == 18

    def test_raises_on_naive(self):
        """ISO string without timezone must raise ValueError."""
        with pytest.raises(ValueError, match="timezone"):
            parse_iso("2024-01-01T12:00:00")
