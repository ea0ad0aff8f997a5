"""Habit tracking tables."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User

HABIT_NAME_MAX_LENGTH = 100


class Habit(SQLModel, table=True):
    """A named daily habit owned by exactly one user."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True, ondelete="CASCADE")
    name: str = Field(nullable=False, max_length=HABIT_NAME_MAX_LENGTH, index=True)
    reminder_time: Optional[time] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    completions: list["Completion"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "Completion",
            back_populates="habit",
            cascade="all, delete-orphan",
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class Completion(SQLModel, table=True):
    """A habit performed on a calendar day; one row per (habit, day)."""

    __tablename__: ClassVar[str] = "completion"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True, ondelete="CASCADE")
    completed_on: date = Field(primary_key=True, index=True)

    habit: "Habit" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Habit", back_populates="completions"),
    )
