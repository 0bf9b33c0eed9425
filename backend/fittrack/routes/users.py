"""
FitTrack Backend — User Route Handlers
========================================

What:  Registration (POST /users), profile lookup and profile update.
How:   The plaintext password is hashed in the handler, before the store is
       called; responses never include the hash.
"""

import logging

from fastapi import APIRouter, Depends, status

from fittrack.config import Settings
from fittrack.domain.user import PasswordHash, User
from fittrack.exceptions import NotFoundError, ValidationError
from fittrack.routes.deps import get_settings, get_user_store
from fittrack.schemas.common import ErrorResponse
from fittrack.schemas.user import UserCreateIn, UserOut, UserUpdateIn
from fittrack.services.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid password", "model": ErrorResponse},
        409: {"description": "Username or email taken", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def register_user(
    payload: UserCreateIn,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> UserOut:
    try:
        password = PasswordHash.from_plaintext(
            payload.password, rounds=settings.password_hash_rounds
        )
    except ValueError as e:
        raise ValidationError(message=str(e), field="password") from e

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=password,
        bio=payload.bio,
    )
    created = await store.create_user(user)
    return UserOut.from_domain(created)


@router.get(
    "/{username}",
    response_model=UserOut,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Look up a user by username",
)
async def get_user(
    username: str,
    store: UserStore = Depends(get_user_store),
) -> UserOut:
    user = await store.get_user_by_username(username)
    if user is None:
        raise NotFoundError(resource="user", resource_id=username)
    return UserOut.from_domain(user)


@router.put(
    "/{user_id}",
    response_model=UserOut,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        409: {"description": "Username or email taken", "model": ErrorResponse},
    },
    summary="Update a user's profile",
)
async def update_user(
    user_id: int,
    payload: UserUpdateIn,
    store: UserStore = Depends(get_user_store),
) -> UserOut:
    user = User(id=user_id, username=payload.username, email=payload.email, bio=payload.bio)
    updated = await store.update_user(user)
    return UserOut.from_domain(updated)
