"""Translation of driver failures into domain errors."""
from __future__ import annotations

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from humor_gallery.core.errors import (
    GalleryError,
    ServiceUnreachableError,
    StoreUnavailableError,
)


def store_error(action: str, exc: SQLAlchemyError) -> GalleryError:
    """Return the domain error for a failed store call.

    Lost connections, refused connections, timeouts and pool exhaustion mean
    the store did not answer within the bounded wait. Anything else is a
    failure of the operation itself.
    """
    if isinstance(exc, (OperationalError, PoolTimeoutError)):
        return ServiceUnreachableError(f"{action}: database unreachable or timed out")
    return StoreUnavailableError(f"{action}: {exc}")
