"""
FitTrack Backend — User Store
===============================

What:  Create, look up and update users.
Why:   Registration and profile edits for the HTTP layer.
How:   One pooled session and one transaction per call, same as WorkoutStore.

Lookup semantics:
    get_user_by_username() returns None for an unknown username — absence is
    a normal result. update_user() on an unknown id raises
    NoRowsAffectedError and changes nothing.

Passwords:
    The store only ever sees PasswordHash values; create_user() refuses a
    user whose hash has not been set.
"""

import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fittrack.database import transaction
from fittrack.domain.user import PasswordHash, User
from fittrack.exceptions import NoRowsAffectedError, ValidationError
from fittrack.models.user import UserRow
from fittrack.services.db_errors import bounded, classify_errors

logger = logging.getLogger(__name__)


class UserStore:
    """Persistence for users."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_timeout: float = 10.0,
    ):
        self._session_factory = session_factory
        self._default_timeout = default_timeout

    async def create_user(self, user: User, *, timeout: Optional[float] = None) -> User:
        """
        Insert a user; fills in id, created_at and updated_at on `user`.

        Raises:
            ValidationError: the password hash was never set
            ConflictError: username or email already taken
        """
        if not user.password_hash.is_set:
            raise ValidationError("password must be set before the user is stored", field="password")

        async def body() -> User:
            with classify_errors("create_user", "transaction"):
                async with transaction(self._session_factory) as session:
                    with classify_errors("create_user", "insert_user"):
                        row = UserRow(
                            username=user.username,
                            email=user.email,
                            password_hash=user.password_hash.hash,
                            bio=user.bio,
                        )
                        session.add(row)
                        await session.flush()
            user.id = row.id
            user.created_at = row.created_at
            user.updated_at = row.updated_at
            return user

        created = await bounded("create_user", body(), self._deadline(timeout))
        logger.info("User %s created (id=%s)", created.username, created.id)
        return created

    async def get_user_by_username(
        self, username: str, *, timeout: Optional[float] = None
    ) -> Optional[User]:
        """Returns the user, or None when no user has this username."""

        async def body() -> Optional[User]:
            with classify_errors("get_user_by_username", "transaction"):
                async with transaction(self._session_factory) as session:
                    with classify_errors("get_user_by_username", "select_user"):
                        result = await session.execute(
                            select(UserRow).where(UserRow.username == username)
                        )
                        row = result.scalar_one_or_none()
            return None if row is None else self._user_from_row(row)

        return await bounded("get_user_by_username", body(), self._deadline(timeout))

    async def update_user(self, user: User, *, timeout: Optional[float] = None) -> User:
        """
        Update username, email and bio of the user whose id is `user.id`.

        Each value is bound to its own parameter and the row is selected by id
        alone. Refreshes `user.updated_at` on success.

        Raises:
            NoRowsAffectedError: no user has this id; the table is unchanged
            ConflictError: the new username or email is taken
        """
        if user.id is None:
            raise ValidationError("user id is required for an update", field="id")

        async def body() -> User:
            with classify_errors("update_user", "transaction"):
                async with transaction(self._session_factory) as session:
                    with classify_errors("update_user", "update_user"):
                        result = await session.execute(
                            update(UserRow)
                            .where(UserRow.id == user.id)
                            .values(
                                username=user.username,
                                email=user.email,
                                bio=user.bio,
                                updated_at=func.current_timestamp(),
                            )
                            .returning(UserRow.updated_at)
                            .execution_options(synchronize_session=False)
                        )
                        updated_at = result.scalar_one_or_none()
                    if updated_at is None:
                        raise NoRowsAffectedError(
                            resource="user",
                            resource_id=str(user.id),
                            context={"operation": "update_user", "step": "update_user"},
                        )
            user.updated_at = updated_at
            return user

        updated = await bounded("update_user", body(), self._deadline(timeout))
        logger.info("User %s updated", updated.id)
        return updated

    def _deadline(self, timeout: Optional[float]) -> float:
        return self._default_timeout if timeout is None else timeout

    @staticmethod
    def _user_from_row(row: UserRow) -> User:
        return User(
            id=row.id,
            username=row.username,
            email=row.email,
            password_hash=PasswordHash(row.password_hash),
            bio=row.bio,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
