"""Habit tracking core: streaks, stats, calendar views and ownership-checked mutations."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .errors import AuthorizationError, NotFoundError, StoreError, ValidationError
from .services.habits import HabitService

__all__ = [
    "AuthorizationError",
    "BaseConfig",
    "DevConfig",
    "HabitService",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
