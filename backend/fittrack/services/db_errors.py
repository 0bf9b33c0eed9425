"""
FitTrack Backend — Database Error Classification
==================================================

What:  Translates SQLAlchemy / driver exceptions into the application's
       error taxonomy, tagged with the operation and step that failed.
Why:   Callers (route handlers, retry decisions upstream) need to tell a
       constraint violation from a dropped connection without knowing which
       driver is underneath.

Mapping:
    IntegrityError                         → ConflictError
    OperationalError, InterfaceError,
    DisconnectionError, pool TimeoutError,
    invalidated connections, OSError       → TransientError
    any other SQLAlchemyError              → DatabaseError

Application errors (FitTrackError) pass through untouched, so nested
guards never wrap twice. The original exception stays attached as
__cause__.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Awaitable, Iterator, TypeVar

from sqlalchemy import exc as sa_exc

from fittrack.exceptions import (
    ConflictError,
    DatabaseError,
    FitTrackError,
    TransientError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    sa_exc.TimeoutError,
    OSError,
)


def classify(error: BaseException, operation: str, step: str) -> FitTrackError:
    """Return the application error for a low-level database failure."""
    context = {
        "operation": operation,
        "step": step,
        "original_error": type(error).__name__,
    }
    if isinstance(error, sa_exc.IntegrityError):
        return ConflictError(
            message=f"{operation} conflicts with existing data",
            context=context,
        )
    if isinstance(error, TRANSIENT_ERRORS) or (
        isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated
    ):
        return TransientError(context=context)
    return DatabaseError(context=context)


@contextmanager
def classify_errors(operation: str, step: str) -> Iterator[None]:
    """
    Re-raise database failures inside the block as classified app errors.

    Example:
        with classify_errors("create_workout", "insert_entries"):
            await session.flush()
    """
    try:
        yield
    except FitTrackError:
        raise
    except (sa_exc.SQLAlchemyError, OSError) as e:
        classified = classify(e, operation, step)
        logger.error(
            "%s failed at %s: %s (%s)",
            operation,
            step,
            type(classified).__name__,
            str(e).splitlines()[0] if str(e) else type(e).__name__,
        )
        raise classified from e


async def bounded(operation: str, body: Awaitable[T], deadline: float) -> T:
    """
    Await `body` under a deadline of `deadline` seconds.

    On expiry the body is cancelled inside its `async with transaction`,
    which rolls the transaction back before TransientError is raised.
    """
    try:
        return await asyncio.wait_for(body, timeout=deadline)
    except asyncio.TimeoutError as e:
        logger.warning("%s exceeded its %.2fs deadline; rolled back", operation, deadline)
        raise TransientError(
            message="The database operation timed out. Please retry.",
            context={"operation": operation, "step": "deadline", "timeout": deadline},
        ) from e
