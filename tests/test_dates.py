"""
Tests for the shared date helpers
"""

from datetime import datetime, timezone

from src.utils.dates import aware, start_of_next_month, start_of_week
from tests.conftest import NOW


def test_week_starts_on_sunday():
    assert start_of_week(NOW) == datetime(2026, 1, 18, tzinfo=timezone.utc)


def test_sunday_is_its_own_week_start():
    sunday = datetime(2026, 1, 18, 15, 30, tzinfo=timezone.utc)
    assert start_of_week(sunday) == datetime(2026, 1, 18, tzinfo=timezone.utc)


def test_next_month_rolls_the_year():
    december = datetime(2025, 12, 31, 23, 0, tzinfo=timezone.utc)
    assert start_of_next_month(december) == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert start_of_next_month(NOW) == datetime(2026, 2, 1, tzinfo=timezone.utc)


def test_naive_is_treated_as_utc():
    assert aware(datetime(2026, 1, 21, 12, 0)) == NOW
    assert aware(NOW) is NOW
