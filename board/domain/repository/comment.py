"""Comment repository interfaces."""

from abc import abstractmethod
from datetime import datetime
from typing import List, Optional

from board.domain.model.comment import Comment
from board.domain.repository.source import OwnedRecordSource
from board.domain.value import CommentId, SortDirection, SourceType, SubjectId
from board.util.cursor import CursorPage


class CommentRepository(OwnedRecordSource):
    """Repository for one comment tree store.

    Defines the contract for comment persistence operations. The three
    subject types each get their own store; see the subclasses below.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier
            include_deleted: Whether a soft-deleted comment may be returned

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_page(
        self,
        subject_id: SubjectId,
        parent_id: Optional[CommentId] = None,
        cursor: Optional[str] = None,
        limit: int = 20,
        direction: SortDirection = SortDirection.DESC,
    ) -> CursorPage[Comment]:
        """Find one page of live comments ordered by ``(created_at, id)``.

        Without ``parent_id`` only top-level comments are listed. With it,
        direct replies of that parent are listed, and only while the
        parent itself is live.

        Args:
            subject_id: Subject the comments hang off
            parent_id: Parent whose replies to list (None for top level)
            cursor: Opaque cursor from a previous page; malformed cursors
                restart from the beginning
            limit: Page size (already clamped by the caller)
            direction: Sort direction

        Returns:
            Page of comments with continuation cursor
        """
        pass

    @abstractmethod
    async def has_live_children(self, parent_id: CommentId) -> bool:
        """Check whether any non-deleted comment has this parent."""
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def set_has_child(self, comment_id: CommentId, has_child: bool) -> None:
        """Overwrite the cached has-child flag of a comment."""
        pass

    @abstractmethod
    async def soft_delete_tree(
        self, comment_id: CommentId, deleted_at: datetime
    ) -> List[CommentId]:
        """Soft-delete a comment and all of its live descendants at once.

        Already deleted nodes are closed branches: they and everything below
        them are left untouched. All affected rows get the same timestamp
        and no partially deleted tree is ever observable.

        Args:
            comment_id: Root of the subtree to delete
            deleted_at: Timestamp to stamp on every deleted row

        Returns:
            IDs of every row deleted, the root included
        """
        pass

    @abstractmethod
    async def reparent_children_to_root(self, parent_id: CommentId) -> int:
        """Detach every direct child of a comment, making them top level.

        Returns:
            Number of comments reparented
        """
        pass


class PostCommentRepository(CommentRepository):
    """Comments on posts."""

    source_type = SourceType.POST_COMMENT


class SiteReviewCommentRepository(CommentRepository):
    """Comments on site reviews."""

    source_type = SourceType.SITE_REVIEW_COMMENT


class ScamReportCommentRepository(CommentRepository):
    """Comments on scam reports."""

    source_type = SourceType.SCAM_REPORT_COMMENT
