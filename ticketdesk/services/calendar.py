"""Season and Mountain Time helpers.

Mountain Time is approximated with the US DST rule (second Sunday in March to
first Sunday in November) instead of a tz database lookup; event times are
stored as naive Mountain wall-clock values.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

MOUNTAIN_STANDARD_OFFSET = timedelta(hours=-7)
MOUNTAIN_DAYLIGHT_OFFSET = timedelta(hours=-6)
SEASON_START_MONTH = 9


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def season_label(start_year: int) -> str:
    return f"{start_year}-{start_year + 1}"


def current_season(now: datetime | date | None = None) -> str:
    """Season covering ``now``; September starts a new one."""
    now = now or utc_now()
    start_year = now.year if now.month >= SEASON_START_MONTH else now.year - 1
    return season_label(start_year)


def recent_seasons(now: datetime | date | None = None, count: int = 5) -> list[str]:
    start_year = int(current_season(now).split("-")[0])
    return [season_label(start_year - offset) for offset in range(count)]


def _nth_sunday(year: int, month: int, n: int) -> date:
    first = date(year, month, 1)
    first_sunday = first + timedelta(days=(6 - first.weekday()) % 7)
    return first_sunday + timedelta(weeks=n - 1)


def is_daylight_saving_time(day: date) -> bool:
    if isinstance(day, datetime):
        day = day.date()
    start = _nth_sunday(day.year, 3, 2)
    end = _nth_sunday(day.year, 11, 1)
    return start <= day < end


def mountain_now(now: datetime | None = None) -> datetime:
    """Naive Mountain wall-clock time. Naive ``now`` values are taken as UTC."""
    now = now or utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    standard = now + MOUNTAIN_STANDARD_OFFSET
    if is_daylight_saving_time(standard.date()):
        return now + MOUNTAIN_DAYLIGHT_OFFSET
    return standard


def mountain_today(now: datetime | None = None) -> date:
    return mountain_now(now).date()


def event_wall_clock(event) -> datetime:
    return datetime.combine(event.date, event.time)


def is_past_event(event, now: datetime | None = None) -> bool:
    return event_wall_clock(event) < mountain_now(now)
