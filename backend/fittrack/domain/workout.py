"""
FitTrack Backend — Workout Domain Types
=========================================

What:  The workout aggregate as plain Python values.
Why:   The store takes and returns these; routes translate them to and from
       JSON schemas; ORM rows never leak past the store.

Measurement is a tagged variant:
    RepetitionMode(reps, weight)   load-bearing exercises
    DurationMode(seconds)          timed exercises (planks, holds)

An entry holds exactly one of them, so "reps and duration both set" cannot
be expressed once an entry exists. Flat, independently-nullable fields (as
they arrive in JSON or come back from a row) go through
entry_validator.measurement_from_fields(), which rejects the mixed case.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union


@dataclass(frozen=True)
class RepetitionMode:
    """Sets of repetitions, optionally under load."""

    reps: Optional[int] = None
    weight: Optional[float] = None


@dataclass(frozen=True)
class DurationMode:
    """Sets held for a fixed time."""

    seconds: int


Measurement = Union[RepetitionMode, DurationMode]


@dataclass
class WorkoutEntry:
    """One exercise line inside a workout."""

    exercise_name: str
    sets: int
    measurement: Measurement
    order_index: int
    notes: str = ""
    id: Optional[int] = None

    # Flat views, used when writing rows and rendering JSON
    @property
    def reps(self) -> Optional[int]:
        return self.measurement.reps if isinstance(self.measurement, RepetitionMode) else None

    @property
    def weight(self) -> Optional[float]:
        return self.measurement.weight if isinstance(self.measurement, RepetitionMode) else None

    @property
    def duration_seconds(self) -> Optional[int]:
        return self.measurement.seconds if isinstance(self.measurement, DurationMode) else None


@dataclass
class Workout:
    """
    Aggregate root: a workout and its ordered entries.

    id, created_at and updated_at are None until the store has persisted the
    workout. entries keep the order they were submitted in; when read back
    they come ordered by order_index.
    """

    title: str
    duration_minutes: int
    description: str = ""
    calories_burned: int = 0
    entries: List[WorkoutEntry] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
