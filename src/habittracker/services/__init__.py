"""Service module exports."""

from . import calendar, export_csv, forms, habits, ownership, stats, streaks, users

__all__ = [
    "calendar",
    "export_csv",
    "forms",
    "habits",
    "ownership",
    "stats",
    "streaks",
    "users",
]
