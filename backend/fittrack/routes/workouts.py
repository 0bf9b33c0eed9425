"""
FitTrack Backend — Workout Route Handlers
===========================================

What:  POST/GET/PUT/DELETE on /workouts.
Why:   Thin HTTP wrapper around WorkoutStore.
How:   Decode JSON → domain Workout, call the store, encode the aggregate.
       Errors are not caught here; the global handlers in main.py map them:
       InvalidEntryError → 400, None / NoRowsAffectedError → 404,
       ConflictError → 409, TransientError → 503.
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from fittrack.exceptions import NotFoundError
from fittrack.routes.deps import get_workout_store
from fittrack.schemas.common import ErrorResponse
from fittrack.schemas.workout import WorkoutIn, WorkoutOut
from fittrack.services.workout_store import WorkoutStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["Workouts"])

ERROR_RESPONSES = {
    400: {"description": "Invalid workout or entry", "model": ErrorResponse},
    409: {"description": "Conflicts with stored data", "model": ErrorResponse},
    503: {"description": "Database temporarily unavailable", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=WorkoutOut,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create a workout with its entries",
)
async def create_workout(
    payload: WorkoutIn,
    store: WorkoutStore = Depends(get_workout_store),
) -> WorkoutOut:
    """
    Create a workout and all of its entries in one transaction.

    Either every row is stored or none is: an invalid entry fails the whole
    request with 400 before anything touches the database.
    """
    created = await store.create_workout(payload.to_domain())
    return WorkoutOut.from_domain(created)


@router.get(
    "/{workout_id}",
    response_model=WorkoutOut,
    responses={404: {"description": "Workout not found", "model": ErrorResponse}},
    summary="Get a workout with its ordered entries",
)
async def get_workout(
    workout_id: int,
    store: WorkoutStore = Depends(get_workout_store),
) -> WorkoutOut:
    workout = await store.get_workout_by_id(workout_id)
    if workout is None:
        raise NotFoundError(resource="workout", resource_id=str(workout_id))
    return WorkoutOut.from_domain(workout)


@router.put(
    "/{workout_id}",
    response_model=WorkoutOut,
    responses={**ERROR_RESPONSES, 404: {"description": "Workout not found", "model": ErrorResponse}},
    summary="Replace a workout and its entries",
)
async def update_workout(
    workout_id: int,
    payload: WorkoutIn,
    store: WorkoutStore = Depends(get_workout_store),
) -> WorkoutOut:
    updated = await store.update_workout(payload.to_domain(workout_id=workout_id))
    return WorkoutOut.from_domain(updated)


@router.delete(
    "/{workout_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Workout not found", "model": ErrorResponse}},
    summary="Delete a workout and its entries",
)
async def delete_workout(
    workout_id: int,
    store: WorkoutStore = Depends(get_workout_store),
) -> Response:
    await store.delete_workout(workout_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
