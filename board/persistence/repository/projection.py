"""PostgreSQL implementations of the per-user projection repositories."""

from typing import Any, Callable, ClassVar, Dict, List, Optional
from uuid import UUID

from sqlalchemy import ColumnElement, Table, select
from sqlalchemy.ext.asyncio import AsyncSession

from board.domain.model import Projection
from board.domain.repository import (
    ProjectionRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.value import SourceType, UserId
from board.persistence.error import storage_errors
from board.persistence.mappers import (
    row_to_user_comment,
    row_to_user_post,
    user_comment_to_dict,
    user_post_to_dict,
)
from board.persistence.tables import user_comments_table, user_posts_table


class PostgresProjectionRepository(ProjectionRepository):
    """PostgreSQL implementation shared by both projection tables.

    ``checkpoint`` commits the session and ``discard`` rolls it back, so
    this repository should own its session rather than share a request's.
    """

    table: ClassVar[Table]
    from_row: ClassVar[Callable[[Dict[str, Any]], Projection]]
    to_dict: ClassVar[Callable[[Projection], Dict[str, Any]]]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _key_condition(
        self, source_type: SourceType, source_id: UUID
    ) -> ColumnElement[bool]:
        raise NotImplementedError

    async def find_by_key(
        self, user_id: UserId, source_type: SourceType, source_id: UUID
    ) -> Optional[Projection]:
        """Find the projection of one source row, deleted or not."""
        t = self.table
        stmt = select(t).where(
            t.c.user_id == user_id, self._key_condition(source_type, source_id)
        )
        with storage_errors():
            result = await self.session.execute(stmt)
        row = result.fetchone()
        return self.from_row(row._asdict()) if row else None

    async def find_all_for_user(
        self, user_id: UserId, include_deleted: bool = True
    ) -> List[Projection]:
        """List every projection row of a user."""
        t = self.table
        stmt = select(t).where(t.c.user_id == user_id)
        if not include_deleted:
            stmt = stmt.where(t.c.deleted_at.is_(None))
        stmt = stmt.order_by(t.c.created_at, t.c.id)

        with storage_errors():
            result = await self.session.execute(stmt)
        return [self.from_row(row._asdict()) for row in result.fetchall()]

    async def create(self, projection: Projection) -> Projection:
        """Insert a new projection row.

        Raises:
            IntegrityError: If the source row already has a projection
        """
        stmt = self.table.insert().values(**self.to_dict(projection))
        with storage_errors():
            await self.session.execute(stmt)
            await self.session.flush()
        return projection

    async def update(self, projection: Projection) -> Projection:
        """Overwrite timestamps and delete state of an existing row."""
        t = self.table
        stmt = (
            t.update()
            .where(t.c.id == projection.id)
            .values(
                created_at=projection.created_at,
                updated_at=projection.updated_at,
                deleted_at=projection.deleted_at,
            )
        )
        with storage_errors():
            await self.session.execute(stmt)
            await self.session.flush()
        return projection

    async def checkpoint(self) -> None:
        """Commit everything applied so far."""
        with storage_errors():
            await self.session.commit()

    async def discard(self) -> None:
        """Roll back to the last checkpoint."""
        with storage_errors():
            await self.session.rollback()


class PostgresUserCommentRepository(
    PostgresProjectionRepository, UserCommentRepository
):
    """``user_comments`` table."""

    table = user_comments_table
    from_row = staticmethod(row_to_user_comment)
    to_dict = staticmethod(user_comment_to_dict)

    def _key_condition(
        self, source_type: SourceType, source_id: UUID
    ) -> ColumnElement[bool]:
        t = self.table
        return (t.c.comment_type == source_type.value) & (t.c.comment_id == source_id)


class PostgresUserPostRepository(PostgresProjectionRepository, UserPostRepository):
    """``user_posts`` table."""

    table = user_posts_table
    from_row = staticmethod(row_to_user_post)
    to_dict = staticmethod(user_post_to_dict)

    def _key_condition(
        self, source_type: SourceType, source_id: UUID
    ) -> ColumnElement[bool]:
        return self.table.c.post_id == source_id
