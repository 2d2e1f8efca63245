"""Persistence layer errors."""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError

from board.domain.error import StorageUnavailableError


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise lost-connection failures as ``StorageUnavailableError``.

    Everything else (constraint violations, bad data) passes through
    untouched so callers can treat it as a per-row failure.
    """
    try:
        yield
    except DBAPIError as e:
        if e.connection_invalidated:
            raise StorageUnavailableError(str(e)) from e
        raise
    except (ConnectionError, TimeoutError) as e:
        raise StorageUnavailableError(str(e)) from e
