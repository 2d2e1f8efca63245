"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from board.config import Settings
from board.domain.repository import (
    AfterCommit,
    CommentStoreFactory,
    PostCommentRepository,
    PostRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.persistence.database import create_engine, create_session_factory
from board.persistence.repository import (
    PostgresCommentStoreFactory,
    PostgresPostCommentRepository,
    PostgresPostRepository,
    PostgresScamReportCommentRepository,
    PostgresSiteReviewCommentRepository,
    PostgresUserCommentRepository,
    PostgresUserPostRepository,
)
from board.persistence.transaction import DeferredAfterCommit
from board.util.di.base import ProviderBase
from board.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_comment_store_factory(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> CommentStoreFactory:
        """Provide comment stores for work detached from a request."""
        return PostgresCommentStoreFactory(session_factory)

    @provide(scope=Scope.REQUEST)
    def get_deferred_after_commit(self) -> DeferredAfterCommit:
        """Provide the post-commit queue of the request session."""
        return DeferredAfterCommit()

    @provide(scope=Scope.REQUEST)
    def get_after_commit(self, deferred: DeferredAfterCommit) -> AfterCommit:
        """Provide post-commit hooks for domain services."""
        return deferred

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        after_commit: DeferredAfterCommit,
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is automatically committed at the end of the request
        if no exception occurred, or rolled back if an exception was raised.
        Post-commit callbacks run only once the commit has succeeded.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.info("Session committed")
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                after_commit.discard()
                raise

        after_commit.run()

    @provide(scope=Scope.REQUEST)
    def get_post_repository(self, session: AsyncSession) -> PostRepository:
        """Provide Post repository."""
        return PostgresPostRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_post_comment_repository(
        self, session: AsyncSession
    ) -> PostCommentRepository:
        """Provide ``post_comments`` repository."""
        return PostgresPostCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_site_review_comment_repository(
        self, session: AsyncSession
    ) -> SiteReviewCommentRepository:
        """Provide ``site_review_comments`` repository."""
        return PostgresSiteReviewCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_scam_report_comment_repository(
        self, session: AsyncSession
    ) -> ScamReportCommentRepository:
        """Provide ``scam_report_comments`` repository."""
        return PostgresScamReportCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_comment_repository(
        self, session: AsyncSession
    ) -> UserCommentRepository:
        """Provide ``user_comments`` repository."""
        return PostgresUserCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_post_repository(self, session: AsyncSession) -> UserPostRepository:
        """Provide ``user_posts`` repository."""
        return PostgresUserPostRepository(session)
