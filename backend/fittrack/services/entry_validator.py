"""
FitTrack Backend — Workout Entry Validator
============================================

What:  Domain rules for workout entries, checked before any database write.
Why:   An invalid entry rejects the whole workout. Running every check up
       front means a rejected workout never opens a transaction, so there is
       nothing to roll back.
How:   Pure functions; each failure raises InvalidEntryError naming the rule
       and the entry's order_index.

Rules:
    - exercise_name is non-blank
    - sets > 0
    - measurement is RepetitionMode or DurationMode, never a mix:
        reps > 0 when set, weight >= 0 when set, at least one of the two
        seconds > 0
    - order_index is unique within one submission
    - every integer fits the INTEGER columns it is stored in, and weight is finite

Duplicate order_index values are rejected rather than tie-broken by
insertion order.
"""

import math
from typing import Iterable, Optional, Set

from fittrack.domain.workout import (
    DurationMode,
    Measurement,
    RepetitionMode,
    Workout,
    WorkoutEntry,
)
from fittrack.exceptions import InvalidEntryError, ValidationError

# PostgreSQL INTEGER (int4) range
INT4_MIN = -2_147_483_648
INT4_MAX = 2_147_483_647


def measurement_from_fields(
    reps: Optional[int] = None,
    weight: Optional[float] = None,
    duration_seconds: Optional[int] = None,
    order_index: Optional[int] = None,
) -> Measurement:
    """
    Build the measurement variant from flat nullable fields.

    Raises:
        InvalidEntryError: both the rep/weight family and duration_seconds
            are set, or neither is
    """
    has_repetition = reps is not None or weight is not None
    has_duration = duration_seconds is not None

    if has_repetition and has_duration:
        raise InvalidEntryError(
            "an entry sets either reps/weight or duration_seconds, not both",
            order_index=order_index,
            field="duration_seconds",
        )
    if has_duration:
        return DurationMode(seconds=duration_seconds)
    if has_repetition:
        return RepetitionMode(reps=reps, weight=weight)
    raise InvalidEntryError(
        "an entry needs reps/weight or duration_seconds",
        order_index=order_index,
        field="reps",
    )


def validate_measurement(measurement: Measurement, order_index: Optional[int] = None) -> None:
    if isinstance(measurement, RepetitionMode):
        if measurement.reps is None and measurement.weight is None:
            raise InvalidEntryError(
                "repetition mode needs reps or weight", order_index=order_index, field="reps"
            )
        if measurement.reps is not None and not 0 < measurement.reps <= INT4_MAX:
            raise InvalidEntryError(
                f"reps must be between 1 and {INT4_MAX}", order_index=order_index, field="reps"
            )
        if measurement.weight is not None and (
            not math.isfinite(measurement.weight) or measurement.weight < 0
        ):
            raise InvalidEntryError(
                "weight must be a finite number, zero or more",
                order_index=order_index,
                field="weight",
            )
    elif isinstance(measurement, DurationMode):
        if measurement.seconds is None or not 0 < measurement.seconds <= INT4_MAX:
            raise InvalidEntryError(
                f"duration_seconds must be between 1 and {INT4_MAX}",
                order_index=order_index,
                field="duration_seconds",
            )
    else:
        raise InvalidEntryError(
            f"unknown measurement {type(measurement).__name__}", order_index=order_index
        )


def validate_entry(entry: WorkoutEntry) -> None:
    """
    Check one entry against the domain rules.

    Raises:
        InvalidEntryError: the first rule the entry breaks
    """
    if not entry.exercise_name or not entry.exercise_name.strip():
        raise InvalidEntryError(
            "exercise_name must not be empty",
            order_index=entry.order_index,
            field="exercise_name",
        )
    if entry.sets is None or not 0 < entry.sets <= INT4_MAX:
        raise InvalidEntryError(
            f"sets must be between 1 and {INT4_MAX}", order_index=entry.order_index, field="sets"
        )
    if entry.order_index is None or not INT4_MIN <= entry.order_index <= INT4_MAX:
        raise InvalidEntryError(
            "order_index is out of range", order_index=entry.order_index, field="order_index"
        )
    validate_measurement(entry.measurement, order_index=entry.order_index)


def validate_entries(entries: Iterable[WorkoutEntry]) -> None:
    """
    Validate a submission batch in order, stopping at the first failure.

    Raises:
        InvalidEntryError: an entry breaks a rule, or repeats an order_index
            already used earlier in the batch
    """
    seen: Set[int] = set()
    for entry in entries:
        validate_entry(entry)
        if entry.order_index in seen:
            raise InvalidEntryError(
                "order_index is already used by another entry in this workout",
                order_index=entry.order_index,
                field="order_index",
            )
        seen.add(entry.order_index)


def validate_workout(workout: Workout) -> None:
    """Workout-level fields first, then every entry."""
    if not workout.title or not workout.title.strip():
        raise ValidationError("title must not be empty", field="title")
    if workout.duration_minutes is None or not 0 < workout.duration_minutes <= INT4_MAX:
        raise ValidationError(
            f"duration_minutes must be between 1 and {INT4_MAX}", field="duration_minutes"
        )
    if workout.calories_burned is None or not 0 <= workout.calories_burned <= INT4_MAX:
        raise ValidationError(
            f"calories_burned must be between 0 and {INT4_MAX}", field="calories_burned"
        )
    validate_entries(workout.entries)
