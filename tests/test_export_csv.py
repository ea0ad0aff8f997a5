"""Tests for the habit CSV export helpers."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from pathlib import Path

from habittracker.domain.records import ExportRow
from habittracker.services import export_csv


def sample_rows() -> list[ExportRow]:
    return [
        ExportRow(habit_name="Journal", created_at=datetime(2024, 1, 3, 9, 0), completed_on=None),
        ExportRow(habit_name='Read "Dune"', created_at=datetime(2024, 1, 1, 9, 0), completed_on=date(2024, 1, 6)),
        ExportRow(habit_name="Read, slowly", created_at=datetime(2024, 1, 1, 9, 0), completed_on=date(2024, 1, 4)),
    ]


def test_export_habits_csv_creates_file(tmp_path):
    """Exporting habit rows writes a CSV with header and rows."""

    output_path = Path(tmp_path) / "nested" / "habits-export.csv"
    written = export_csv.export_habits_csv(rows=sample_rows(), output_path=output_path)

    assert written == output_path
    assert output_path.exists(), "habit export should create a CSV file"

    with output_path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert [row["Habit Name"] for row in rows] == ["Journal", 'Read "Dune"', "Read, slowly"]
    assert rows[0]["Completed Date"] == ""
    assert rows[1]["Completed Date"] == "2024-01-06"
    assert rows[1]["Created At"] == "2024-01-01T09:00:00"


def test_write_habits_csv_to_stream_returns_row_count():
    buffer = io.StringIO()
    count = export_csv.write_habits_csv(sample_rows(), buffer)

    assert count == 3
    lines = buffer.getvalue().splitlines()
    assert lines[0] == "Habit Name,Created At,Completed Date"
    assert lines[2] == '"Read ""Dune""",2024-01-01T09:00:00,2024-01-06'


def test_empty_export_has_header_only():
    buffer = io.StringIO()
    assert export_csv.write_habits_csv([], buffer) == 0
    assert buffer.getvalue().splitlines() == ["Habit Name,Created At,Completed Date"]
