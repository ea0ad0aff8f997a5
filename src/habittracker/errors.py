"""Failure kinds raised by the habit tracking core."""

from __future__ import annotations


class HabitTrackerError(Exception):
    """Base class for errors surfaced to callers of the core."""


class ValidationError(HabitTrackerError, ValueError):
    """Malformed caller input (habit name, reminder time, calendar month)."""

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.errors: dict[str, list[str]] = errors or {}


class AuthorizationError(HabitTrackerError, PermissionError):
    """The habit exists but belongs to another user."""

    def __init__(self, habit_id: int, user_id: int) -> None:
        super().__init__(f"Habit #{habit_id} is not owned by user #{user_id}")
        self.habit_id = habit_id
        self.user_id = user_id


class NotFoundError(HabitTrackerError, LookupError):
    """The target habit does not exist at all."""

    def __init__(self, habit_id: int) -> None:
        super().__init__(f"Habit #{habit_id} not found")
        self.habit_id = habit_id


class StoreError(HabitTrackerError, RuntimeError):
    """The persistence layer failed; not retried by the core."""


__all__ = [
    "AuthorizationError",
    "HabitTrackerError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
