"""In-memory comment repositories for testing."""

from datetime import datetime
from typing import Optional

from board.domain.model.comment import Comment
from board.domain.repository.comment import (
    CommentRepository,
    PostCommentRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
)
from board.domain.value import CommentId, SortDirection, SourceRecord, SubjectId, UserId
from board.util.cursor import CursorPage, build_page, decode_cursor, is_after


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation shared by every comment store."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID."""
        comment = self._comments.get(comment_id)
        if comment is None or (comment.is_deleted and not include_deleted):
            return None
        return comment

    async def find_page(
        self,
        subject_id: SubjectId,
        parent_id: Optional[CommentId] = None,
        cursor: Optional[str] = None,
        limit: int = 20,
        direction: SortDirection = SortDirection.DESC,
    ) -> CursorPage[Comment]:
        """Find one page of live comments ordered by ``(created_at, id)``."""
        if parent_id is not None and await self.find_by_id(parent_id) is None:
            return CursorPage(data=[], next_cursor=None, has_more=False)

        comments = [
            c
            for c in self._comments.values()
            if c.subject_id == subject_id
            and c.parent_id == parent_id
            and not c.is_deleted
        ]

        position = decode_cursor(cursor)
        if position is not None:
            comments = [
                c for c in comments if is_after(c.created_at, c.id, position, direction)
            ]

        comments.sort(
            key=lambda c: (c.created_at, c.id),
            reverse=direction is SortDirection.DESC,
        )
        return build_page(comments[: limit + 1], limit, lambda c: (c.id, c.created_at))

    async def has_live_children(self, parent_id: CommentId) -> bool:
        """Check whether any non-deleted comment has this parent."""
        return any(
            c.parent_id == parent_id and not c.is_deleted
            for c in self._comments.values()
        )

    async def list_for_user_including_deleted(
        self, user_id: UserId
    ) -> list[SourceRecord]:
        """List every comment a user wrote, soft-deleted ones included."""
        return [
            SourceRecord(
                id=c.id,
                user_id=c.author_id,
                created_at=c.created_at,
                updated_at=c.updated_at,
                deleted_at=c.deleted_at,
            )
            for c in self._comments.values()
            if c.author_id == user_id
        ]

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        self._comments[comment.id] = comment
        return comment

    async def set_has_child(self, comment_id: CommentId, has_child: bool) -> None:
        """Overwrite the cached has-child flag of a comment."""
        comment = self._comments.get(comment_id)
        if comment:
            self._comments[comment_id] = comment.model_copy(
                update={"has_child": has_child}
            )

    async def soft_delete_tree(
        self, comment_id: CommentId, deleted_at: datetime
    ) -> list[CommentId]:
        """Soft-delete a live comment and its live descendants.

        Collects the whole subtree level by level first, then marks it in
        one pass, so nothing is half deleted if collection fails.
        """
        if await self.find_by_id(comment_id) is None:
            return []

        collected: list[CommentId] = [comment_id]
        seen = {comment_id}
        frontier = {comment_id}
        while frontier:
            level = [
                c.id
                for c in self._comments.values()
                if c.parent_id in frontier and not c.is_deleted and c.id not in seen
            ]
            collected.extend(level)
            seen.update(level)
            frontier = set(level)

        for cid in collected:
            self._comments[cid] = self._comments[cid].model_copy(
                update={"deleted_at": deleted_at}
            )
        return collected

    async def reparent_children_to_root(self, parent_id: CommentId) -> int:
        """Detach every direct child of a comment, making them top level."""
        children = [c for c in self._comments.values() if c.parent_id == parent_id]
        for child in children:
            self._comments[child.id] = child.model_copy(update={"parent_id": None})
        return len(children)


class InMemoryPostCommentRepository(InMemoryCommentRepository, PostCommentRepository):
    """In-memory ``post_comments``."""


class InMemorySiteReviewCommentRepository(
    InMemoryCommentRepository, SiteReviewCommentRepository
):
    """In-memory ``site_review_comments``."""


class InMemoryScamReportCommentRepository(
    InMemoryCommentRepository, ScamReportCommentRepository
):
    """In-memory ``scam_report_comments``."""
