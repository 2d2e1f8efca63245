"""PostgreSQL implementation of Post repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from board.domain.model import Post
from board.domain.repository import PostRepository
from board.domain.value import PostId, SourceRecord, UserId
from board.persistence.mappers import post_to_dict, row_to_post, row_to_source_record
from board.persistence.tables import posts_table


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(
        self, post_id: PostId, include_deleted: bool = False
    ) -> Optional[Post]:
        """Find a post by ID."""
        stmt = select(posts_table).where(posts_table.c.id == post_id)
        if not include_deleted:
            stmt = stmt.where(posts_table.c.deleted_at.is_(None))

        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def list_for_user_including_deleted(
        self, user_id: UserId
    ) -> List[SourceRecord]:
        """List every post a user wrote, soft-deleted ones included."""
        t = posts_table
        stmt = (
            select(t.c.id, t.c.user_id, t.c.created_at, t.c.updated_at, t.c.deleted_at)
            .where(t.c.user_id == user_id)
            .order_by(t.c.created_at, t.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_source_record(row._asdict()) for row in result.fetchall()]

    async def save(self, post: Post) -> Post:
        """Save a post (create or update)."""
        values = post_to_dict(post)
        existing = await self.find_by_id(post.id, include_deleted=True)

        if existing:
            stmt = (
                posts_table.update()
                .where(posts_table.c.id == post.id)
                .values(**values)
            )
        else:
            stmt = posts_table.insert().values(**values)

        await self.session.execute(stmt)
        await self.session.flush()
        return post
