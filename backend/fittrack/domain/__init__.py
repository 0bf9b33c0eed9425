"""
FitTrack Backend — Domain Types
=================================

Plain values passed between route handlers and stores.
"""

from fittrack.domain.user import PasswordHash, User
from fittrack.domain.workout import (
    DurationMode,
    Measurement,
    RepetitionMode,
    Workout,
    WorkoutEntry,
)

__all__ = [
    "DurationMode",
    "Measurement",
    "PasswordHash",
    "RepetitionMode",
    "User",
    "Workout",
    "WorkoutEntry",
]
