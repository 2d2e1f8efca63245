"""PostgreSQL implementations of the comment repositories."""

from datetime import datetime
from typing import ClassVar, List, Optional

from sqlalchemy import Table, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from board.domain.model import Comment
from board.domain.repository import (
    CommentRepository,
    PostCommentRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
)
from board.domain.value import CommentId, SortDirection, SourceRecord, SubjectId, UserId
from board.persistence.mappers import comment_to_dict, row_to_comment, row_to_source_record
from board.persistence.pagination import apply_keyset
from board.persistence.tables import (
    post_comments_table,
    scam_report_comments_table,
    site_review_comments_table,
)
from board.util.cursor import CursorPage, build_page


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation shared by every comment table.

    Subclasses bind the table and the name of its subject column.
    """

    table: ClassVar[Table]
    subject_column: ClassVar[str]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    def _to_comment(self, row) -> Comment:
        return row_to_comment(row._asdict(), self.subject_column)

    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID."""
        t = self.table
        stmt = select(t).where(t.c.id == comment_id)
        if not include_deleted:
            stmt = stmt.where(t.c.deleted_at.is_(None))

        result = await self.session.execute(stmt)
        row = result.fetchone()
        return self._to_comment(row) if row else None

    async def find_page(
        self,
        subject_id: SubjectId,
        parent_id: Optional[CommentId] = None,
        cursor: Optional[str] = None,
        limit: int = 20,
        direction: SortDirection = SortDirection.DESC,
    ) -> CursorPage[Comment]:
        """Find one page of live comments ordered by ``(created_at, id)``."""
        t = self.table
        stmt = (
            select(t)
            .where(t.c[self.subject_column] == subject_id)
            .where(t.c.deleted_at.is_(None))
        )

        if parent_id is None:
            stmt = stmt.where(t.c.parent_comment_id.is_(None))
        else:
            parent = t.alias("parent")
            stmt = stmt.where(t.c.parent_comment_id == parent_id).where(
                exists().where(parent.c.id == parent_id, parent.c.deleted_at.is_(None))
            )

        stmt = apply_keyset(stmt, t.c.created_at, t.c.id, cursor, limit, direction)

        result = await self.session.execute(stmt)
        comments = [self._to_comment(row) for row in result.fetchall()]
        return build_page(comments, limit, lambda c: (c.id, c.created_at))

    async def has_live_children(self, parent_id: CommentId) -> bool:
        """Check whether any non-deleted comment has this parent."""
        t = self.table
        stmt = select(
            exists().where(
                t.c.parent_comment_id == parent_id, t.c.deleted_at.is_(None)
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def list_for_user_including_deleted(
        self, user_id: UserId
    ) -> List[SourceRecord]:
        """List every comment a user wrote, soft-deleted ones included."""
        t = self.table
        stmt = (
            select(t.c.id, t.c.user_id, t.c.created_at, t.c.updated_at, t.c.deleted_at)
            .where(t.c.user_id == user_id)
            .order_by(t.c.created_at, t.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_source_record(row._asdict()) for row in result.fetchall()]

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        t = self.table
        values = comment_to_dict(comment, self.subject_column)
        existing = await self.find_by_id(comment.id, include_deleted=True)

        if existing:
            stmt = t.update().where(t.c.id == comment.id).values(**values)
        else:
            stmt = t.insert().values(**values)

        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def set_has_child(self, comment_id: CommentId, has_child: bool) -> None:
        """Overwrite the cached has-child flag of a comment."""
        t = self.table
        stmt = update(t).where(t.c.id == comment_id).values(has_child=has_child)
        await self.session.execute(stmt)
        await self.session.flush()

    async def soft_delete_tree(
        self, comment_id: CommentId, deleted_at: datetime
    ) -> List[CommentId]:
        """Soft-delete a live comment and its live descendants in one statement.

        ``UNION`` rather than ``UNION ALL`` keeps the walk finite even if the
        stored parent links contain a cycle.
        """
        t = self.table
        child = t.alias("child")

        subtree = (
            select(t.c.id)
            .where(t.c.id == comment_id, t.c.deleted_at.is_(None))
            .cte("subtree", recursive=True)
        )
        subtree = subtree.union(
            select(child.c.id).where(
                child.c.parent_comment_id == subtree.c.id,
                child.c.deleted_at.is_(None),
            )
        )

        stmt = (
            update(t)
            .where(t.c.id.in_(select(subtree.c.id)))
            .values(deleted_at=deleted_at)
            .returning(t.c.id)
        )
        result = await self.session.execute(stmt)
        deleted = [CommentId(row.id) for row in result.fetchall()]
        await self.session.flush()
        return deleted

    async def reparent_children_to_root(self, parent_id: CommentId) -> int:
        """Detach every direct child of a comment, making them top level."""
        t = self.table
        stmt = (
            update(t)
            .where(t.c.parent_comment_id == parent_id)
            .values(parent_comment_id=None)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0


class PostgresPostCommentRepository(PostgresCommentRepository, PostCommentRepository):
    """``post_comments`` table."""

    table = post_comments_table
    subject_column = "post_id"


class PostgresSiteReviewCommentRepository(
    PostgresCommentRepository, SiteReviewCommentRepository
):
    """``site_review_comments`` table."""

    table = site_review_comments_table
    subject_column = "review_id"


class PostgresScamReportCommentRepository(
    PostgresCommentRepository, ScamReportCommentRepository
):
    """``scam_report_comments`` table."""

    table = scam_report_comments_table
    subject_column = "scam_report_id"
