"""Ownership checks run before mutations and restricted reads."""

from __future__ import annotations

from ..domain.records import HabitRecord
from ..domain.repositories.habit import HabitStore
from ..errors import AuthorizationError, NotFoundError
from ..logging_config import get_logger

logger = get_logger(__name__)


class OwnershipGuard:
    """Confirms that a habit belongs to the requesting user."""

    def __init__(self, store: HabitStore) -> None:
        self.store = store

    def require_owner(self, habit_id: int, *, user_id: int) -> HabitRecord:
        """Return the habit when ``user_id`` owns it.

        Raises:
            NotFoundError: no habit has this id.
            AuthorizationError: the habit belongs to another user.
        """

        habit = self.store.get_habit(habit_id)
        if habit is None:
            raise NotFoundError(habit_id)
        if habit.user_id != user_id:
            logger.warning(
                "Ownership check denied",
                extra={"habit_id": habit_id, "user_id": user_id},
            )
            raise AuthorizationError(habit_id, user_id)
        return habit


__all__ = ["OwnershipGuard"]
