"""In-memory post-commit hooks for testing."""

from typing import Callable

from board.domain.repository import AfterCommit


class ImmediateAfterCommit(AfterCommit):
    """In-memory stores have no transactions: every write is already visible."""

    def add(self, callback: Callable[[], None]) -> None:
        callback()
