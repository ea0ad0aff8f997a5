"""Streak calculations over completion dates."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Union

DateLike = Union[date, datetime]


def _as_day(value: DateLike) -> date:
    """Strip any time-of-day so comparisons happen on calendar days."""

    if isinstance(value, datetime):
        return value.date()
    return value


def _distinct_days(dates: Iterable[DateLike]) -> set[date]:
    return {_as_day(value) for value in dates}


def current_streak(dates: Iterable[DateLike], *, today: DateLike | None = None) -> int:
    """Count consecutive days with a completion, walking backward from ``today``.

    The i-th newest day must equal ``today - i``. A missing ``today`` ends the
    walk immediately, so the streak is 0 until the habit is checked in for the
    current day. Any gap, or a day after ``today``, stops the count.
    """

    days = sorted(_distinct_days(dates), reverse=True)
    anchor = _as_day(today) if today is not None else date.today()

    streak = 0
    for day in days:
        if day != anchor - timedelta(days=streak):
            break
        streak += 1
    return streak


def longest_streak(dates: Iterable[DateLike]) -> int:
    """Return the longest run of consecutive days anywhere in the history."""

    longest = 0
    run = 0
    last_day: date | None = None
    for day in sorted(_distinct_days(dates)):
        if last_day is not None and day == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


def compute_streaks(
    dates: Iterable[DateLike], *, today: DateLike | None = None
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) from a collection of dates."""

    days = _distinct_days(dates)
    return current_streak(days, today=today), longest_streak(days)


__all__ = ["compute_streaks", "current_streak", "longest_streak"]
