"""Post-commit hooks."""

from abc import ABC, abstractmethod
from typing import Callable


class AfterCommit(ABC):
    """Defers work until the current unit of work has committed.

    Detached tasks read through a connection of their own and only see
    committed rows, so whatever they depend on must be durable first.
    """

    @abstractmethod
    def add(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the current unit of work commits.

        Callbacks of a unit of work that rolls back never run.
        """
        pass
