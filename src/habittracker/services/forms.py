"""Habit input form definitions."""

from __future__ import annotations

from datetime import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..models.habit import HABIT_NAME_MAX_LENGTH


class HabitForm(BaseModel):
    """Validated payload for creating or editing a habit."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(description="Short label for the habit")
    reminder_time: time | None = Field(default=None, description="Daily reminder time of day")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Require a non-blank name of at most 100 characters."""

        if not value:
            raise ValueError("Habit name is required")
        if len(value) > HABIT_NAME_MAX_LENGTH:
            raise ValueError(f"Habit name too long (max {HABIT_NAME_MAX_LENGTH} characters)")
        return value

    @field_validator("reminder_time", mode="before")
    @classmethod
    def parse_reminder_time(cls, value: Any) -> time | None:
        """Accept ``time`` objects or ``HH:MM[:SS]`` strings; blank means no reminder."""

        if value is None or isinstance(value, time):
            return value
        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return None
            try:
                return time.fromisoformat(raw)
            except ValueError:
                pass
        raise ValueError("Reminder time must be a valid time of day (HH:MM)")


def _structured_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        structured.setdefault(key, []).append(message)
    return structured


def validate_habit_input(name: Any, reminder_time: Any = None) -> HabitForm:
    """Validate raw habit input, raising the core ValidationError on failure."""

    try:
        return HabitForm.model_validate(
            {"name": "" if name is None else name, "reminder_time": reminder_time}
        )
    except PydanticValidationError as exc:
        errors = _structured_errors(exc)
        first = next(iter(errors.values()))[0]
        raise ValidationError(first, errors) from exc


__all__ = ["HabitForm", "validate_habit_input"]
