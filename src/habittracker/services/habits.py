"""Habit tracking service: listings, stats, check-ins and ownership-checked mutations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable, Optional

from ..domain.records import ExportRow, HabitRecord
from ..domain.repositories.habit import HabitStore
from ..errors import NotFoundError, ValidationError
from ..logging_config import get_logger
from .calendar import month_bounds, parse_month, project_calendar
from .forms import validate_habit_input
from .ownership import OwnershipGuard
from .stats import (
    HabitSort,
    HabitSummary,
    StatsSnapshot,
    aggregate_stats,
    build_habit_summary,
    sort_habits,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class HabitOverview:
    """View model for the habit listing page."""

    today: date
    sort: HabitSort
    habits: list[HabitSummary]
    stats: StatsSnapshot


@dataclass(frozen=True, slots=True)
class HabitHistory:
    habit_id: int
    name: str
    completions: list[date]


class HabitService:
    """Entry point used by the web/CLI layers.

    The store is injected; ``clock`` returns the current local time and decides
    what "today" means for check-ins, streaks and reminders.
    """

    def __init__(self, store: HabitStore, *, clock: Clock = datetime.now) -> None:
        self.store = store
        self.guard = OwnershipGuard(store)
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    def _check_in_day(self, on: Optional[date]) -> date:
        today = self.today()
        if on is None:
            return today
        if on > today:
            raise ValidationError(
                "Cannot check in on a future date", {"on": [f"Date must not be after {today.isoformat()}."]}
            )
        return on

    # Reads ---------------------------------------------------------------

    def _summaries(self, *, user_id: int, today: date) -> list[HabitSummary]:
        return [
            build_habit_summary(item, today=today)
            for item in self.store.list_with_completions(user_id=user_id)
        ]

    def overview(self, *, user_id: int, sort: "str | HabitSort | None" = None) -> HabitOverview:
        """Habits enriched with streaks plus the stats snapshot."""

        today = self.today()
        option = HabitSort.parse(sort)
        summaries = self._summaries(user_id=user_id, today=today)
        return HabitOverview(
            today=today,
            sort=option,
            habits=sort_habits(summaries, option),
            stats=aggregate_stats(summaries, today=today),
        )

    def history(self, habit_id: int, *, user_id: int) -> HabitHistory:
        """Completion dates for one owned habit, newest first."""

        habit = self.guard.require_owner(habit_id, user_id=user_id)
        completions = self.store.completions_for_habit(habit_id, user_id=user_id)
        return HabitHistory(habit_id=habit.id, name=habit.name, completions=completions)

    def calendar(self, year: Any, month: Any, *, user_id: int) -> dict[str, list[str]]:
        """Map each day of the month with completions to the habit names done that day."""

        year_num, month_num = parse_month(year, month)
        start, end = month_bounds(year_num, month_num)
        entries = self.store.completions_between(start, end, user_id=user_id)
        return project_calendar(entries)

    def export_rows(self, *, user_id: int) -> list[ExportRow]:
        return self.store.export_rows(user_id=user_id)

    def pending_reminders(self, *, user_id: int) -> list[HabitSummary]:
        """Habits whose reminder time has passed today and that are not checked in yet."""

        now = self._clock()
        current_time = now.time()
        due = [
            habit
            for habit in self._summaries(user_id=user_id, today=now.date())
            if habit.reminder_time is not None
            and habit.reminder_time <= current_time
            and not habit.checked_in_today
        ]
        return sorted(due, key=lambda habit: habit.reminder_time or time.min)

    # Mutations -----------------------------------------------------------

    def add_habit(
        self, name: Any, reminder_time: Any = None, *, user_id: int
    ) -> HabitRecord:
        form = validate_habit_input(name, reminder_time)
        habit = self.store.create_habit(
            user_id=user_id, name=form.name, reminder_time=form.reminder_time
        )
        logger.info("Habit created", extra={"habit_id": habit.id, "user_id": user_id})
        return habit

    def edit_habit(
        self, habit_id: int, name: Any, reminder_time: Any = None, *, user_id: int
    ) -> HabitRecord:
        form = validate_habit_input(name, reminder_time)
        self.guard.require_owner(habit_id, user_id=user_id)
        habit = self.store.update_habit(
            habit_id, user_id=user_id, name=form.name, reminder_time=form.reminder_time
        )
        if habit is None:
            # Deleted between the ownership check and the update.
            raise NotFoundError(habit_id)
        logger.info("Habit updated", extra={"habit_id": habit_id, "user_id": user_id})
        return habit

    def delete_habit(self, habit_id: int, *, user_id: int) -> None:
        self.guard.require_owner(habit_id, user_id=user_id)
        if not self.store.delete_habit(habit_id, user_id=user_id):
            raise NotFoundError(habit_id)
        logger.info("Habit deleted", extra={"habit_id": habit_id, "user_id": user_id})

    def check_in(self, habit_id: int, *, user_id: int, on: Optional[date] = None) -> bool:
        """Record a completion (default: today). Returns False when it already existed."""

        day = self._check_in_day(on)
        self.guard.require_owner(habit_id, user_id=user_id)
        inserted = self.store.add_completion(habit_id, day, user_id=user_id)
        logger.info(
            "Habit checked in",
            extra={"habit_id": habit_id, "user_id": user_id, "day": day, "inserted": inserted},
        )
        return inserted

    def undo_check_in(self, habit_id: int, *, user_id: int, on: Optional[date] = None) -> bool:
        """Remove the completion (default: today). Returns False when there was none."""

        day = self._check_in_day(on)
        self.guard.require_owner(habit_id, user_id=user_id)
        removed = self.store.remove_completion(habit_id, day, user_id=user_id)
        logger.info(
            "Habit check-in undone",
            extra={"habit_id": habit_id, "user_id": user_id, "day": day, "removed": removed},
        )
        return removed


__all__ = ["HabitHistory", "HabitOverview", "HabitService"]
