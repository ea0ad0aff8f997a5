"""Typed records crossing the store boundary."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True, slots=True)
class HabitRecord:
    id: int
    user_id: int
    name: str
    created_at: datetime
    reminder_time: Optional[time] = None


@dataclass(frozen=True, slots=True)
class HabitCompletions:
    """A habit with every completion date it has, newest first."""

    habit: HabitRecord
    completions: tuple[date, ...] = ()


@dataclass(frozen=True, slots=True)
class CalendarEntry:
    completed_on: date
    habit_name: str


@dataclass(frozen=True, slots=True)
class ExportRow:
    """One export line; ``completed_on`` is None for habits never checked in."""

    habit_name: str
    created_at: datetime
    completed_on: Optional[date]
