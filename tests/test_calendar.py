from datetime import date, datetime, timezone

import pytest

from ticketdesk.services.calendar import (
    current_season,
    is_daylight_saving_time,
    mountain_now,
    mountain_today,
    recent_seasons,
)


@pytest.mark.parametrize(
    "today, season",
    [
        (date(2025, 9, 1), "2025-2026"),
        (date(2025, 8, 31), "2024-2025"),
        (date(2026, 1, 15), "2025-2026"),
        (date(2025, 12, 31), "2025-2026"),
    ],
)
def test_current_season_starts_in_september(today, season):
    assert current_season(today) == season


def test_recent_seasons():
    assert recent_seasons(date(2025, 10, 1), count=3) == ["2025-2026", "2024-2025", "2023-2024"]


@pytest.mark.parametrize(
    "day, expected",
    [
        (date(2025, 3, 8), False),
        (date(2025, 3, 9), True),
        (date(2025, 7, 4), True),
        (date(2025, 11, 1), True),
        (date(2025, 11, 2), False),
        (date(2025, 12, 25), False),
    ],
)
def test_daylight_saving_window(day, expected):
    assert is_daylight_saving_time(day) is expected


def test_mountain_standard_time():
    now = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
    assert mountain_now(now) == datetime(2025, 1, 15, 5, 0)


def test_mountain_daylight_time_from_naive_utc():
    assert mountain_now(datetime(2025, 7, 1, 12, 0)) == datetime(2025, 7, 1, 6, 0)


def test_mountain_today_crosses_midnight():
    now = datetime(2025, 7, 2, 3, 0, tzinfo=timezone.utc)
    assert mountain_today(now) == date(2025, 7, 1)
