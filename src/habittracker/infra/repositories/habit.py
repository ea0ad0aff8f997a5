"""SQLModel implementation of the habit store."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, time
from typing import Iterator, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ...domain.records import CalendarEntry, ExportRow, HabitCompletions, HabitRecord
from ...errors import StoreError
from ...logging_config import get_logger
from ...models.habit import Completion, Habit
from ..database import SessionFactory

logger = get_logger(__name__)

_UPSERT_DIALECTS = {"sqlite": sqlite_insert, "postgresql": pg_insert}


def _to_record(habit: Habit) -> HabitRecord:
    return HabitRecord(
        id=habit.id,  # type: ignore[arg-type]
        user_id=habit.user_id,
        name=habit.name,
        created_at=habit.created_at,
        reminder_time=habit.reminder_time,
    )


class SQLModelHabitStore:
    """SQLModel-based habit store implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """Open a session and translate driver failures into StoreError."""
        try:
            with self.session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Store operation failed", extra={"operation": operation}, exc_info=True)
            raise StoreError(f"{operation} failed: {exc}") from exc

    def _owned(self, session: Session, habit_id: int, user_id: int) -> Optional[Habit]:
        return session.exec(
            select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
        ).first()

    def list_with_completions(self, *, user_id: int) -> list[HabitCompletions]:
        """Return habits newest first, each with completions newest first."""
        with self._session("list_with_completions") as session:
            statement = (
                select(Habit, Completion)
                .join(Completion, Completion.habit_id == Habit.id, isouter=True)  # type: ignore[arg-type]
                .where(Habit.user_id == user_id)
                .order_by(
                    Habit.created_at.desc(),  # type: ignore[attr-defined]
                    Habit.id.desc(),  # type: ignore[union-attr]
                    Completion.completed_on.desc(),  # type: ignore[attr-defined]
                )
            )
            grouped: dict[int, tuple[HabitRecord, list[date]]] = {}
            for habit, completion in session.exec(statement).all():
                bucket = grouped.get(habit.id)
                if bucket is None:
                    bucket = grouped[habit.id] = (_to_record(habit), [])
                if completion is not None:
                    bucket[1].append(completion.completed_on)

        return [
            HabitCompletions(habit=record, completions=tuple(days))
            for record, days in grouped.values()
        ]

    def get_habit(self, habit_id: int) -> Optional[HabitRecord]:
        """Retrieve a habit by ID regardless of owner."""
        with self._session("get_habit") as session:
            habit = session.get(Habit, habit_id)
            return _to_record(habit) if habit else None

    def create_habit(
        self, *, user_id: int, name: str, reminder_time: Optional[time]
    ) -> HabitRecord:
        """Create a new habit."""
        with self._session("create_habit") as session:
            habit = Habit(user_id=user_id, name=name, reminder_time=reminder_time)
            session.add(habit)
            session.commit()
            session.refresh(habit)
            return _to_record(habit)

    def update_habit(
        self, habit_id: int, *, user_id: int, name: str, reminder_time: Optional[time]
    ) -> Optional[HabitRecord]:
        """Update name and reminder of an owned habit."""
        with self._session("update_habit") as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return None
            habit.name = name
            habit.reminder_time = reminder_time
            session.add(habit)
            session.commit()
            session.refresh(habit)
            return _to_record(habit)

    def delete_habit(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit together with its completions in one transaction."""
        with self._session("delete_habit") as session:
            habit = self._owned(session, habit_id, user_id)
            if habit is None:
                return False
            # relationship cascade removes the completions in the same flush
            session.delete(habit)
            session.commit()
        logger.debug("Habit deleted", extra={"habit_id": habit_id})
        return True

    def add_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Insert a completion; duplicates are ignored by the database."""
        with self._session("add_completion") as session:
            if self._owned(session, habit_id, user_id) is None:
                return False
            inserted = self._insert_ignoring_duplicate(session, habit_id, completed_on)
            session.commit()
            return inserted

    def _insert_ignoring_duplicate(self, session: Session, habit_id: int, completed_on: date) -> bool:
        values = {"habit_id": habit_id, "completed_on": completed_on}
        insert = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
        if insert is not None:
            statement = insert(Completion.__table__).values(**values).on_conflict_do_nothing()  # type: ignore[attr-defined]
            result = session.connection().execute(statement)
            return result.rowcount == 1

        # Other backends: let the primary key reject the duplicate inside a savepoint.
        try:
            with session.begin_nested():
                session.add(Completion(**values))
        except IntegrityError:
            return False
        return True

    def remove_completion(self, habit_id: int, completed_on: date, *, user_id: int) -> bool:
        """Delete the completion for (habit, day) when the habit is owned."""
        with self._session("remove_completion") as session:
            completion = session.exec(
                select(Completion)
                .join(Habit, Habit.id == Completion.habit_id)  # type: ignore[arg-type]
                .where(Completion.habit_id == habit_id)
                .where(Completion.completed_on == completed_on)
                .where(Habit.user_id == user_id)
            ).first()
            if completion is None:
                return False
            session.delete(completion)
            session.commit()
            return True

    def completions_for_habit(self, habit_id: int, *, user_id: int) -> list[date]:
        """Return completion dates for one habit, newest first."""
        with self._session("completions_for_habit") as session:
            statement = (
                select(Completion.completed_on)
                .join(Habit, Habit.id == Completion.habit_id)  # type: ignore[arg-type]
                .where(Completion.habit_id == habit_id)
                .where(Habit.user_id == user_id)
                .order_by(Completion.completed_on.desc())  # type: ignore[attr-defined]
            )
            return list(session.exec(statement).all())

    def completions_between(
        self, start: date, end: date, *, user_id: int
    ) -> list[CalendarEntry]:
        """Return completions in the inclusive window with their habit names."""
        with self._session("completions_between") as session:
            statement = (
                select(Completion.completed_on, Habit.name)
                .join(Habit, Habit.id == Completion.habit_id)  # type: ignore[arg-type]
                .where(Habit.user_id == user_id)
                .where(Completion.completed_on >= start)
                .where(Completion.completed_on <= end)
                .order_by(Completion.completed_on, Habit.name)  # type: ignore[arg-type]
            )
            return [
                CalendarEntry(completed_on=completed_on, habit_name=name)
                for completed_on, name in session.exec(statement).all()
            ]

    def export_rows(self, *, user_id: int) -> list[ExportRow]:
        """Return (name, created_at, completed_on) rows for the user's export."""
        with self._session("export_rows") as session:
            statement = (
                select(Habit.name, Habit.created_at, Completion.completed_on)
                .join(Completion, Completion.habit_id == Habit.id, isouter=True)  # type: ignore[arg-type]
                .where(Habit.user_id == user_id)
                .order_by(Habit.name, Completion.completed_on.desc())  # type: ignore[attr-defined]
            )
            return [
                ExportRow(habit_name=name, created_at=created_at, completed_on=completed_on)
                for name, created_at, completed_on in session.exec(statement).all()
            ]
