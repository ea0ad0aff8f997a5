"""CSV export helpers for habit history."""

from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, TextIO

from ..domain.records import ExportRow

EXPORT_HEADERS = ["Habit Name", "Created At", "Completed Date"]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def write_habits_csv(rows: Iterable[ExportRow], stream: TextIO) -> int:
    """Write export rows to an open text stream; returns the number of data rows."""

    writer = csv.writer(stream, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_HEADERS)
    count = 0
    for row in rows:
        writer.writerow(
            [
                _serialize_value(row.habit_name),
                _serialize_value(row.created_at),
                _serialize_value(row.completed_on),
            ]
        )
        count += 1
    return count


def export_habits_csv(*, rows: Iterable[ExportRow], output_path: Path) -> Path:
    """Write habit export rows to CSV at `output_path`.

    Columns are deterministic: Habit Name, Created At, Completed Date.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        write_habits_csv(rows, fh)

    return output_path
