"""Detached comment store access."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Mapping

from board.domain.repository.comment import CommentRepository
from board.domain.value import SourceType


class CommentStoreFactory(ABC):
    """Opens comment stores outside of any request.

    Background work must not reuse the session of the request that
    triggered it, since that session is closed (or committed) long before
    the background task runs. Each ``session()`` gets its own unit of work,
    committed when the block exits cleanly.
    """

    @abstractmethod
    def session(
        self,
    ) -> AbstractAsyncContextManager[Mapping[SourceType, CommentRepository]]:
        """Open all comment stores on a fresh unit of work."""
        pass
