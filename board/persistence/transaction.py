"""Post-commit hooks bound to a database session."""

from typing import Callable

import logfire

from board.domain.repository import AfterCommit


class DeferredAfterCommit(AfterCommit):
    """Queues callbacks until the owner of the session commits it.

    The request session provider calls ``run`` after a successful commit
    and ``discard`` after a rollback.
    """

    def __init__(self) -> None:
        self._callbacks: list[Callable[[], None]] = []

    def add(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    @property
    def pending(self) -> int:
        """Callbacks waiting for the commit."""
        return len(self._callbacks)

    def run(self) -> None:
        """Run and forget every queued callback, in queue order."""
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        if callbacks:
            logfire.debug("Post-commit callbacks run", count=len(callbacks))

    def discard(self) -> None:
        """Forget every queued callback without running it."""
        if self._callbacks:
            logfire.warn(
                "Post-commit callbacks dropped after rollback",
                count=len(self._callbacks),
            )
        self._callbacks = []
