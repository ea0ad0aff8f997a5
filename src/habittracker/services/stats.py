"""Per-habit summaries and the aggregate stats snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence

from ..domain.records import HabitCompletions
from .streaks import compute_streaks

WEEK_WINDOW_DAYS = 7


class HabitSort(str, Enum):
    """Ordering options for the habit listing."""

    NEWEST = "newest"
    OLDEST = "oldest"
    STREAK = "streak"
    ALPHABETICAL = "alphabetical"

    @classmethod
    def parse(cls, value: "str | HabitSort | None") -> "HabitSort":
        """Return the matching option, defaulting to newest for unknown values."""

        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.NEWEST


@dataclass(frozen=True, slots=True)
class HabitSummary:
    """Habit enriched with streak and check-in state for presentation."""

    id: int
    name: str
    created_at: datetime
    reminder_time: Optional[time]
    completions: tuple[date, ...]
    checked_in_today: bool
    streak: int
    longest_streak: int

    @property
    def total_completions(self) -> int:
        return len(self.completions)


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    total_habits: int
    completed_today: int
    completion_rate: int
    total_completions_this_week: int
    total_all_time: int


def build_habit_summary(item: HabitCompletions, *, today: date) -> HabitSummary:
    """Attach streaks and today's state to a stored habit."""

    completions = tuple(sorted(set(item.completions), reverse=True))
    current, longest = compute_streaks(completions, today=today)
    return HabitSummary(
        id=item.habit.id,
        name=item.habit.name,
        created_at=item.habit.created_at,
        reminder_time=item.habit.reminder_time,
        completions=completions,
        checked_in_today=today in completions,
        streak=current,
        longest_streak=longest,
    )


def completion_rate(completed: int, total: int) -> int:
    """Percentage of ``total`` that is ``completed``, rounded half up; 0 when total is 0."""

    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def aggregate_stats(habits: Sequence[HabitSummary], *, today: date) -> StatsSnapshot:
    """Build the stats snapshot from already-enriched habits."""

    week_start = today - timedelta(days=WEEK_WINDOW_DAYS - 1)
    completed_today = sum(1 for habit in habits if habit.checked_in_today)
    this_week = sum(
        1
        for habit in habits
        for day in habit.completions
        if week_start <= day <= today
    )
    return StatsSnapshot(
        total_habits=len(habits),
        completed_today=completed_today,
        completion_rate=completion_rate(completed_today, len(habits)),
        total_completions_this_week=this_week,
        total_all_time=sum(habit.total_completions for habit in habits),
    )


def sort_habits(habits: Iterable[HabitSummary], sort: "str | HabitSort | None") -> list[HabitSummary]:
    """Order summaries for display; ties keep their incoming order."""

    option = HabitSort.parse(sort)
    items = list(habits)
    if option is HabitSort.OLDEST:
        return sorted(items, key=lambda habit: habit.created_at)
    if option is HabitSort.STREAK:
        return sorted(items, key=lambda habit: habit.streak, reverse=True)
    if option is HabitSort.ALPHABETICAL:
        return sorted(items, key=lambda habit: habit.name.casefold())
    return sorted(items, key=lambda habit: habit.created_at, reverse=True)


__all__ = [
    "HabitSort",
    "HabitSummary",
    "StatsSnapshot",
    "aggregate_stats",
    "build_habit_summary",
    "completion_rate",
    "sort_habits",
]
