"""
FitTrack Backend — Route Dependencies
=======================================

What:  FastAPI dependencies that hand route handlers the stores and settings
       built by create_app().
Why:   Stores live on app.state, created once from explicit Settings; no
       route reaches for a module-level global.
"""

from fastapi import Request

from fittrack.config import Settings
from fittrack.services.user_store import UserStore
from fittrack.services.workout_store import WorkoutStore


def get_workout_store(request: Request) -> WorkoutStore:
    return request.app.state.workout_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
