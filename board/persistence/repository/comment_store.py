"""PostgreSQL comment store factory for detached work."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from board.domain.repository import CommentRepository, CommentStoreFactory
from board.domain.value import SourceType
from board.persistence.database import unit_of_work
from board.persistence.repository.comment import (
    PostgresPostCommentRepository,
    PostgresScamReportCommentRepository,
    PostgresSiteReviewCommentRepository,
)


def comment_repositories(session: AsyncSession) -> dict[SourceType, CommentRepository]:
    """Bind every comment table to one session."""
    return {
        SourceType.POST_COMMENT: PostgresPostCommentRepository(session),
        SourceType.SITE_REVIEW_COMMENT: PostgresSiteReviewCommentRepository(session),
        SourceType.SCAM_REPORT_COMMENT: PostgresScamReportCommentRepository(session),
    }


class PostgresCommentStoreFactory(CommentStoreFactory):
    """Opens the comment tables on a session of their own."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Mapping[SourceType, CommentRepository]]:
        async with unit_of_work(self.session_factory) as session:
            yield comment_repositories(session)
