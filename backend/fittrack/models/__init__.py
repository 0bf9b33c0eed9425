"""
FitTrack Backend — ORM Models
===============================

Importing this package registers every table with Base.metadata, which is
what Alembic autogenerate and the test suite's create_all() rely on.
"""

from fittrack.models.user import UserRow
from fittrack.models.workout import WorkoutEntryRow, WorkoutRow

__all__ = ["UserRow", "WorkoutEntryRow", "WorkoutRow"]
