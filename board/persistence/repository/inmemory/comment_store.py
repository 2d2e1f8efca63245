"""In-memory comment store factory for testing."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from board.domain.repository import CommentRepository, CommentStoreFactory
from board.domain.value import SourceType


class InMemoryCommentStoreFactory(CommentStoreFactory):
    """Hands out the same in-memory stores every time."""

    def __init__(self, repositories: Mapping[SourceType, CommentRepository]) -> None:
        self.repositories = repositories

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Mapping[SourceType, CommentRepository]]:
        yield self.repositories
