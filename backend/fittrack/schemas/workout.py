"""
FitTrack Backend — Workout Request/Response Schemas
=====================================================

What:  Pydantic models defining the JSON contract for /workouts.
Why:   The wire format keeps measurement fields flat (reps, weight,
       duration_seconds) because that is what clients send; the domain uses
       the RepetitionMode | DurationMode variant. Conversion happens here,
       at the edge.
How:   Pydantic checks JSON types (FastAPI answers 422 on a type mismatch);
       domain rules are left to the entry validator, which answers 400.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fittrack.domain.workout import Workout, WorkoutEntry
from fittrack.services.entry_validator import measurement_from_fields


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class WorkoutEntryIn(BaseModel):
    """
    One exercise line as submitted.

    Set reps and/or weight for load-bearing exercises, or duration_seconds
    for timed ones. Sending both is rejected with 400.
    """
    exercise_name: str = Field(description="Exercise name, e.g. 'Bench press'")
    sets: int = Field(description="Number of sets (positive)")
    reps: Optional[int] = Field(default=None, description="Repetitions per set")
    weight: Optional[float] = Field(
        default=None, allow_inf_nan=False, description="Load per repetition"
    )
    duration_seconds: Optional[int] = Field(default=None, description="Hold time per set")
    notes: str = Field(default="", description="Free-text notes")
    order_index: int = Field(description="Position within the workout, unique per workout")

    def to_domain(self) -> WorkoutEntry:
        """
        Raises:
            InvalidEntryError: both or neither measurement family is set
        """
        return WorkoutEntry(
            exercise_name=self.exercise_name,
            sets=self.sets,
            measurement=measurement_from_fields(
                reps=self.reps,
                weight=self.weight,
                duration_seconds=self.duration_seconds,
                order_index=self.order_index,
            ),
            order_index=self.order_index,
            notes=self.notes,
        )


class WorkoutIn(BaseModel):
    """Body of POST /workouts and PUT /workouts/{id}."""
    title: str = Field(description="Workout title")
    description: str = Field(default="", description="Longer description")
    duration_minutes: int = Field(description="Total duration in minutes (positive)")
    calories_burned: int = Field(default=0, description="Estimated calories (zero or more)")
    entries: List[WorkoutEntryIn] = Field(default_factory=list)

    def to_domain(self, workout_id: Optional[int] = None) -> Workout:
        return Workout(
            id=workout_id,
            title=self.title,
            description=self.description,
            duration_minutes=self.duration_minutes,
            calories_burned=self.calories_burned,
            entries=[entry.to_domain() for entry in self.entries],
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class WorkoutEntryOut(BaseModel):
    id: Optional[int] = None
    exercise_name: str
    sets: int
    reps: Optional[int] = None
    weight: Optional[float] = None
    duration_seconds: Optional[int] = None
    notes: str = ""
    order_index: int

    @classmethod
    def from_domain(cls, entry: WorkoutEntry) -> "WorkoutEntryOut":
        return cls(
            id=entry.id,
            exercise_name=entry.exercise_name,
            sets=entry.sets,
            reps=entry.reps,
            weight=entry.weight,
            duration_seconds=entry.duration_seconds,
            notes=entry.notes,
            order_index=entry.order_index,
        )


class WorkoutOut(BaseModel):
    """Full workout aggregate as returned by every /workouts endpoint."""
    id: int
    title: str
    description: str
    duration_minutes: int
    calories_burned: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    entries: List[WorkoutEntryOut]

    @classmethod
    def from_domain(cls, workout: Workout) -> "WorkoutOut":
        return cls(
            id=workout.id,
            title=workout.title,
            description=workout.description,
            duration_minutes=workout.duration_minutes,
            calories_burned=workout.calories_burned,
            created_at=workout.created_at,
            updated_at=workout.updated_at,
            entries=[WorkoutEntryOut.from_domain(entry) for entry in workout.entries],
        )
