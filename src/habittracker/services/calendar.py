"""Month calendar projection of completions."""

from __future__ import annotations

from calendar import monthrange
from datetime import MAXYEAR, MINYEAR, date
from typing import Iterable, Union

from ..domain.records import CalendarEntry
from ..errors import ValidationError

MonthInput = Union[int, str, None]


def _parse_component(value: MonthInput, field: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Year and month are required", {field: ["This field is required."]})
    if isinstance(value, bool):
        raise ValidationError("Invalid year or month", {field: ["Must be a whole number."]})
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(
            "Invalid year or month", {field: ["Must be a whole number."]}
        ) from exc


def parse_month(year: MonthInput, month: MonthInput) -> tuple[int, int]:
    """Validate a (year, month) pair coming from caller input."""

    year_num = _parse_component(year, "year")
    month_num = _parse_component(month, "month")
    if not 1 <= month_num <= 12:
        raise ValidationError("Invalid year or month", {"month": ["Month must be between 1 and 12."]})
    if not MINYEAR <= year_num <= MAXYEAR:
        raise ValidationError(
            "Invalid year or month", {"year": [f"Year must be between {MINYEAR} and {MAXYEAR}."]}
        )
    return year_num, month_num


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last calendar day of the month."""

    last_day = monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def project_calendar(entries: Iterable[CalendarEntry]) -> dict[str, list[str]]:
    """Group completions by ISO date; names within a day are sorted ascending."""

    grouped: dict[date, list[str]] = {}
    for entry in entries:
        grouped.setdefault(entry.completed_on, []).append(entry.habit_name)
    return {day.isoformat(): sorted(grouped[day]) for day in sorted(grouped)}


__all__ = ["month_bounds", "parse_month", "project_calendar"]
