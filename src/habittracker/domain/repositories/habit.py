"""Habit store protocol."""

from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol

from ..records import CalendarEntry, ExportRow, HabitCompletions, HabitRecord


class HabitStore(Protocol):
    """Persistence contract for habits and their completions.

    Every operation except ``get_habit`` is scoped by the owning user id.
    """

    def list_with_completions(self, *, user_id: int) -> list[HabitCompletions]:
        """Return the user's habits (newest first) with their completions in one read."""
        ...

    def get_habit(self, habit_id: int) -> Optional[HabitRecord]:
        """Look a habit up by id regardless of owner."""
        ...

    def create_habit(
        self, *, user_id: int, name: str, reminder_time: Optional[time]
    ) -> HabitRecord:
        """Insert a habit for the user."""
        ...

    def update_habit(
        self, habit_id: int, *, user_id: int, name: str, reminder_time: Optional[time]
    ) -> Optional[HabitRecord]:
        """Rename/re-time a habit; None when nothing matched the owner scope."""
        ...

    def delete_habit(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its completions atomically."""
        ...

    def add_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Record a completion; a duplicate (habit, day) is a no-op returning False."""
        ...

    def remove_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Remove the completion for (habit, day)."""
        ...

    def completions_for_habit(self, habit_id: int, *, user_id: int) -> list[date]:
        """Return completion dates for one habit, newest first."""
        ...

    def completions_between(
        self, start: date, end: date, *, user_id: int
    ) -> list[CalendarEntry]:
        """Return completions within [start, end] joined with habit names."""
        ...

    def export_rows(self, *, user_id: int) -> list[ExportRow]:
        """Return export rows ordered by habit name then completion date descending."""
        ...
