"""Pytest configuration and shared fixtures for habit tracker tests.

This module provides database fixtures, test data factories, and helper utilities
for testing domain logic, the SQLModel store, and services without touching a real
application database.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, time, timezone
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from habittracker.infra.database import create_session_factory
from habittracker.infra.repositories.habit import SQLModelHabitStore
from habittracker.models import Completion, Habit, User
from habittracker.services.habits import HabitService

# A fixed "today" keeps streak/stats assertions independent of the wall clock.
TODAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 12, 0)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session used to arrange test data."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, as used by the store and user services."""
    return create_session_factory(db_engine)


@pytest.fixture
def store(session_factory) -> SQLModelHabitStore:
    return SQLModelHabitStore(session_factory)


@pytest.fixture
def service_factory(store):
    """Build a HabitService whose clock is pinned to ``now``."""

    def _create_service(now: datetime = NOW) -> HabitService:
        return HabitService(store, clock=lambda: now)

    return _create_service


@pytest.fixture
def service(service_factory) -> HabitService:
    return service_factory()


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(db_session):
    """Factory for creating users keyed by a provider id."""

    def _create_user(provider_id: str = "google-tester", email: str | None = None) -> User:
        user = User(
            provider_id=provider_id,
            email=email or f"{provider_id}@example.com",
            name=provider_id.title(),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default owner for habits."""
    return user_factory("google-tester")


@pytest.fixture
def other_user(user_factory) -> User:
    """A second user who must never see or change the default user's data."""
    return user_factory("google-intruder")


@pytest.fixture
def habit_factory(db_session, user):
    """Factory for creating test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        owner: User | None = None,
        created_at: datetime | None = None,
        reminder_time: time | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            name=name,
            reminder_time=reminder_time,
            created_at=created_at or datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc),
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def completion_factory(db_session):
    """Persist completions for a habit on the given days."""

    def _create_completions(habit: Habit, *days: date) -> list[Completion]:
        rows = [Completion(habit_id=habit.id, completed_on=day) for day in days]
        db_session.add_all(rows)
        db_session.commit()
        return rows

    return _create_completions
