"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from utils.timezone import now_utc, as_utc


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        """Result must have tzinfo set (not naive)."""
        result = now_utc()
        assert result.tzinfo is not None

    def test_is_utc(self):
        """Result timezone must be specifically UTC."""
        result = now_utc()
        assert result.tzinfo == timezone.utc


class TestAsUtc:
    """Tests for as_utc()."""

    def test_naive_is_taken_as_utc(self):
        """Naive datetime keeps its wall clock and gains UTC tzinfo."""
        naive = datetime(2024, 1, 1, 12, 0, 0)
        result = as_utc(naive)
        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_converts_other_timezone(self):
        """Chicago 12:00 in January should become UTC 18:00."""
        chicago = datetime(2024, 1, 1, 12, 0, 0, tzinfo=ZoneInfo("America/Chicago"))
        result = as_utc(chicago)
        assert result.tzinfo == timezone.utc
        assert result.hour == 18

    def test_naive_and_aware_become_comparable(self):
        """Mixed naive/aware inputs can be ordered after normalizing."""
        naive = datetime(2024, 1, 1, 12, 0, 0)
        aware = datetime(2024, 1, 1, 13, 0, 0, tzinfo=timezone.utc)
        assert as_utc(naive) < as_utc(aware)
