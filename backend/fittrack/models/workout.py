"""
FitTrack Backend — Workout SQLAlchemy Models
==============================================

What:  ORM models for the `workouts` and `workout_entries` tables.
Why:   Maps rows to Python objects for the workout store; Alembic and the
       test suite read the same metadata.
Who:   Used only by WorkoutStore. Routes never see ORM rows — the store
       converts them into domain objects (fittrack.domain.workout).

Table Design Rationale:
    - BIGINT identity keys generated by the database
    - created_at / updated_at: server-side CURRENT_TIMESTAMP, read back
      through RETURNING (eager_defaults) so the aggregate returned from a
      create carries them without a second query
    - workout_entries.workout_id: FK with ON DELETE CASCADE — entries have no
      lifecycle outside their workout
    - ck_workout_entries_measurement: exactly one measurement family per row
      (reps/weight OR duration_seconds)

    Unique (workout_id, order_index):
        An order_index is used once per workout; the backing index serves
        the read path "entries of workout X in display order".
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from fittrack.database import Base

# SQLite only auto-increments INTEGER PRIMARY KEY columns; the test suite
# runs against SQLite, production against PostgreSQL BIGINT identity.
IdType = BigInteger().with_variant(Integer, "sqlite")


class WorkoutRow(Base):
    """One row of `workouts`; the root of the workout aggregate."""

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    calories_burned: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))

    # Why TIMESTAMP WITH TIME ZONE: unambiguous across server time zones
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_workouts_duration_positive"),
        CheckConstraint("calories_burned >= 0", name="ck_workouts_calories_non_negative"),
    )
    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        return f"<WorkoutRow(id={self.id}, title='{self.title}')>"


class WorkoutEntryRow(Base):
    """One exercise line of a workout."""

    __tablename__ = "workout_entries"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(
        IdType,
        ForeignKey("workouts.id", ondelete="CASCADE"),
        nullable=False,
    )
    exercise_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("sets > 0", name="ck_workout_entries_sets_positive"),
        CheckConstraint(
            "((reps IS NOT NULL OR weight IS NOT NULL) AND duration_seconds IS NULL)"
            " OR (reps IS NULL AND weight IS NULL AND duration_seconds IS NOT NULL)",
            name="ck_workout_entries_measurement",
        ),
        UniqueConstraint("workout_id", "order_index", name="uq_workout_entries_workout_order"),
    )

    def __repr__(self) -> str:
        return (
            f"<WorkoutEntryRow(id={self.id}, workout_id={self.workout_id}, "
            f"order_index={self.order_index})>"
        )
