"""
FitTrack Backend — Workout Aggregate Store
============================================

What:  Atomic create, composite read, replace and delete of a workout and
       its ordered entries.
Why:   A workout and its entries are one consistency unit. No caller may
       ever observe a workout row without the entries it was submitted
       with, or entries left behind by a failed write.
How:   Every operation borrows one pooled session, runs inside a scoped
       transaction (commit on success, rollback on any other exit), and is
       bounded by a deadline.

Create Flow:
    ┌──────────┐    ┌─────────┐    ┌─────────────┐    ┌──────────────┐    ┌────────┐
    │ Validate │───▶│  BEGIN  │───▶│ INSERT      │───▶│ INSERT       │───▶│ COMMIT │
    │ entries  │    │         │    │ workout     │    │ entries (N)  │    │        │
    └──────────┘    └─────────┘    └─────────────┘    └──────────────┘    └────────┘
         │                                  any failure / deadline ──▶ ROLLBACK
         └── invalid: InvalidEntryError, no session opened

Error Handling Strategy:
    InvalidEntryError / ValidationError: raised before the transaction
    ConflictError:     constraint violation, transaction rolled back
    TransientError:    connectivity loss or deadline expiry, rolled back
    NoRowsAffectedError: update/delete of a workout id that does not exist
    Nothing is retried here; retry decisions belong to the caller.

Concurrency:
    No in-process locks. Two creates never interact (distinct generated
    ids); two writers on the same workout are serialized only by the
    database's transaction isolation.
"""

import dataclasses
import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fittrack.database import transaction
from fittrack.domain.workout import Workout, WorkoutEntry
from fittrack.exceptions import NoRowsAffectedError, ValidationError
from fittrack.models.workout import WorkoutEntryRow, WorkoutRow
from fittrack.services.db_errors import bounded, classify_errors
from fittrack.services.entry_validator import measurement_from_fields, validate_workout

logger = logging.getLogger(__name__)


class WorkoutStore:
    """
    Persistence for the workout aggregate.

    Responsibilities:
        - create_workout(): validate, then insert workout + entries atomically
        - get_workout_by_id(): workout + entries ordered by order_index, or None
        - update_workout(): replace scalar fields and the entry batch atomically
        - delete_workout(): remove a workout; entries cascade through the FK

    Every public method accepts `timeout` (seconds). When omitted the store's
    default, from Settings.db_operation_timeout, applies.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_timeout: float = 10.0,
    ):
        self._session_factory = session_factory
        self._default_timeout = default_timeout

    # ── Public API ────────────────────────────────────────────────────────

    async def create_workout(self, workout: Workout, *, timeout: Optional[float] = None) -> Workout:
        """
        Persist a new workout and all of its entries as one unit.

        Args:
            workout: The aggregate to store. id/created_at/updated_at are ignored.
            timeout: Deadline in seconds for the whole operation.

        Returns:
            A new Workout with the generated id and timestamps, entries in
            the order they were submitted, each carrying its generated id.

        Raises:
            InvalidEntryError / ValidationError: before anything is written
            ConflictError: a constraint rejected a row; nothing was kept
            TransientError: connection lost or deadline expired; nothing was kept
            DatabaseError: any other database failure; nothing was kept
        """
        validate_workout(workout)
        created = await bounded(
            "create_workout", self._insert_aggregate(workout), self._deadline(timeout)
        )
        logger.info(
            "Workout %s created with %d entries", created.id, len(created.entries)
        )
        return created

    async def get_workout_by_id(
        self, workout_id: int, *, timeout: Optional[float] = None
    ) -> Optional[Workout]:
        """
        Load a workout with its entries ordered by order_index.

        Returns:
            The aggregate, or None when no workout has this id. Absence is
            not an error.
        """
        return await bounded(
            "get_workout_by_id", self._load_aggregate(workout_id), self._deadline(timeout)
        )

    async def update_workout(self, workout: Workout, *, timeout: Optional[float] = None) -> Workout:
        """
        Replace a stored workout's fields and entry batch.

        The previous entries are deleted and the submitted ones inserted in
        the same transaction, so readers see either the old aggregate or the
        new one.

        Raises:
            ValidationError: workout.id missing, or any entry invalid
            NoRowsAffectedError: no workout has this id; nothing changed
        """
        if workout.id is None:
            raise ValidationError("workout id is required for an update", field="id")
        validate_workout(workout)
        updated = await bounded(
            "update_workout", self._replace_aggregate(workout), self._deadline(timeout)
        )
        logger.info(
            "Workout %s updated with %d entries", updated.id, len(updated.entries)
        )
        return updated

    async def delete_workout(self, workout_id: int, *, timeout: Optional[float] = None) -> None:
        """
        Delete a workout and, through ON DELETE CASCADE, its entries.

        Raises:
            NoRowsAffectedError: no workout has this id
        """
        await bounded(
            "delete_workout", self._delete_aggregate(workout_id), self._deadline(timeout)
        )
        logger.info("Workout %s deleted", workout_id)

    # ── Transaction Bodies ────────────────────────────────────────────────

    async def _insert_aggregate(self, workout: Workout) -> Workout:
        op = "create_workout"
        with classify_errors(op, "transaction"):
            async with transaction(self._session_factory) as session:
                with classify_errors(op, "insert_workout"):
                    row = WorkoutRow(
                        title=workout.title,
                        description=workout.description,
                        duration_minutes=workout.duration_minutes,
                        calories_burned=workout.calories_burned,
                    )
                    session.add(row)
                    # RETURNING brings back id, created_at, updated_at
                    await session.flush()

                with classify_errors(op, "insert_entries"):
                    entry_rows = await self._insert_entries(session, row.id, workout.entries)

        return self._assemble(row, workout.entries, entry_rows)

    async def _load_aggregate(self, workout_id: int) -> Optional[Workout]:
        op = "get_workout_by_id"
        with classify_errors(op, "transaction"):
            async with transaction(self._session_factory) as session:
                with classify_errors(op, "select_workout"):
                    result = await session.execute(
                        select(WorkoutRow).where(WorkoutRow.id == workout_id)
                    )
                    row = result.scalar_one_or_none()

                if row is None:
                    return None

                with classify_errors(op, "select_entries"):
                    result = await session.execute(
                        select(WorkoutEntryRow)
                        .where(WorkoutEntryRow.workout_id == workout_id)
                        .order_by(WorkoutEntryRow.order_index, WorkoutEntryRow.id)
                    )
                    entry_rows = list(result.scalars().all())

        entries = [self._entry_from_row(entry_row) for entry_row in entry_rows]
        return self._workout_from_row(row, entries)

    async def _replace_aggregate(self, workout: Workout) -> Workout:
        op = "update_workout"
        with classify_errors(op, "transaction"):
            async with transaction(self._session_factory) as session:
                with classify_errors(op, "update_workout"):
                    result = await session.execute(
                        update(WorkoutRow)
                        .where(WorkoutRow.id == workout.id)
                        .values(
                            title=workout.title,
                            description=workout.description,
                            duration_minutes=workout.duration_minutes,
                            calories_burned=workout.calories_burned,
                            updated_at=func.current_timestamp(),
                        )
                        .returning(WorkoutRow.created_at, WorkoutRow.updated_at)
                        .execution_options(synchronize_session=False)
                    )
                    stamps = result.one_or_none()

                if stamps is None:
                    raise NoRowsAffectedError(
                        resource="workout",
                        resource_id=str(workout.id),
                        context={"operation": op, "step": "update_workout"},
                    )

                with classify_errors(op, "delete_entries"):
                    await session.execute(
                        delete(WorkoutEntryRow)
                        .where(WorkoutEntryRow.workout_id == workout.id)
                        .execution_options(synchronize_session=False)
                    )

                with classify_errors(op, "insert_entries"):
                    entry_rows = await self._insert_entries(session, workout.id, workout.entries)

        entries = [
            dataclasses.replace(entry, id=entry_row.id)
            for entry, entry_row in zip(workout.entries, entry_rows)
        ]
        return dataclasses.replace(
            workout,
            entries=entries,
            created_at=stamps.created_at,
            updated_at=stamps.updated_at,
        )

    async def _delete_aggregate(self, workout_id: int) -> None:
        op = "delete_workout"
        with classify_errors(op, "transaction"):
            async with transaction(self._session_factory) as session:
                with classify_errors(op, "delete_workout"):
                    result = await session.execute(
                        delete(WorkoutRow)
                        .where(WorkoutRow.id == workout_id)
                        .execution_options(synchronize_session=False)
                    )
                if result.rowcount == 0:
                    raise NoRowsAffectedError(
                        resource="workout",
                        resource_id=str(workout_id),
                        context={"operation": op, "step": "delete_workout"},
                    )

    # ── Helpers ───────────────────────────────────────────────────────────

    def _deadline(self, timeout: Optional[float]) -> float:
        return self._default_timeout if timeout is None else timeout

    @staticmethod
    async def _insert_entries(
        session: AsyncSession, workout_id: int, entries: Sequence[WorkoutEntry]
    ) -> List[WorkoutEntryRow]:
        """Insert entry rows in submitted order; returns them with ids assigned."""
        entry_rows = [
            WorkoutEntryRow(
                workout_id=workout_id,
                exercise_name=entry.exercise_name,
                sets=entry.sets,
                reps=entry.reps,
                weight=entry.weight,
                duration_seconds=entry.duration_seconds,
                notes=entry.notes or "",
                order_index=entry.order_index,
            )
            for entry in entries
        ]
        if entry_rows:
            session.add_all(entry_rows)
            await session.flush()
        return entry_rows

    @staticmethod
    def _assemble(
        row: WorkoutRow,
        entries: Sequence[WorkoutEntry],
        entry_rows: Sequence[WorkoutEntryRow],
    ) -> Workout:
        stored = [
            dataclasses.replace(entry, id=entry_row.id)
            for entry, entry_row in zip(entries, entry_rows)
        ]
        return WorkoutStore._workout_from_row(row, stored)

    @staticmethod
    def _workout_from_row(row: WorkoutRow, entries: List[WorkoutEntry]) -> Workout:
        return Workout(
            id=row.id,
            title=row.title,
            description=row.description,
            duration_minutes=row.duration_minutes,
            calories_burned=row.calories_burned,
            created_at=row.created_at,
            updated_at=row.updated_at,
            entries=entries,
        )

    @staticmethod
    def _entry_from_row(row: WorkoutEntryRow) -> WorkoutEntry:
        return WorkoutEntry(
            id=row.id,
            exercise_name=row.exercise_name,
            sets=row.sets,
            measurement=measurement_from_fields(
                reps=row.reps,
                weight=row.weight,
                duration_seconds=row.duration_seconds,
                order_index=row.order_index,
            ),
            order_index=row.order_index,
            notes=row.notes,
        )
