"""Comment domain service."""

from datetime import datetime, timezone
from functools import partial
from typing import Mapping
from uuid import uuid4

import logfire

from board.domain.error import BadReferenceError, NotFoundError, ParentNotFoundError
from board.domain.model.comment import Comment
from board.domain.repository import AfterCommit, CommentRepository
from board.domain.value import (
    CommentId,
    SortDirection,
    SourceType,
    SubjectId,
    UserId,
)
from board.util.cursor import CursorPage

from .base import Service
from .has_child_service import HasChildUpdater


class CommentService(Service):
    """Domain service for comment tree operations.

    One service drives all three comment stores; every operation names the
    store it works on through a ``SourceType``.
    """

    def __init__(
        self,
        comment_repositories: Mapping[SourceType, CommentRepository],
        has_child_updater: HasChildUpdater,
        after_commit: AfterCommit,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repositories: Comment store per comment source type
            has_child_updater: Background has-child recomputation
            after_commit: Hooks of the unit of work the stores write to
        """
        self.comment_repositories = comment_repositories
        self.has_child_updater = has_child_updater
        self.after_commit = after_commit

    def _repository(self, source_type: SourceType) -> CommentRepository:
        try:
            return self.comment_repositories[source_type]
        except KeyError:
            raise ValueError(f"Not a comment source: {source_type.value}") from None

    def _recompute_has_child(
        self, source_type: SourceType, parent_id: CommentId | None
    ) -> None:
        """Schedule a has-child run once this unit of work has committed."""
        if parent_id is None:
            return
        self.after_commit.add(
            partial(self.has_child_updater.schedule, source_type, parent_id)
        )

    async def create_comment(
        self,
        source_type: SourceType,
        subject_id: SubjectId,
        author_id: UserId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a comment on a subject or reply to another comment.

        Args:
            source_type: Comment store to write to
            subject_id: Subject the comment hangs off
            author_id: Author user ID
            content: Comment text
            parent_id: Parent comment ID for replies (None for top-level)

        Returns:
            Created comment

        Raises:
            ParentNotFoundError: If the parent is missing or deleted
            BadReferenceError: If the parent belongs to another subject or
                its ancestor chain is broken
        """
        with logfire.span(
            "comment_service.create_comment",
            source_type=source_type.value,
            subject_id=str(subject_id),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            repository = self._repository(source_type)

            if parent_id:
                await self._validate_parent(repository, subject_id, parent_id)

            now = datetime.now(timezone.utc)
            comment = Comment(
                id=CommentId(uuid4()),
                subject_id=subject_id,
                author_id=author_id,
                content=content,
                parent_id=parent_id,
                has_child=False,
                created_at=now,
                updated_at=now,
                deleted_at=None,
            )

            saved = await repository.save(comment)
            logfire.info(
                "Comment created",
                source_type=source_type.value,
                comment_id=str(saved.id),
                subject_id=str(subject_id),
                parent_id=str(parent_id) if parent_id else None,
            )

            self._recompute_has_child(source_type, parent_id)
            return saved

    async def _validate_parent(
        self,
        repository: CommentRepository,
        subject_id: SubjectId,
        parent_id: CommentId,
    ) -> None:
        """Walk from the parent up to its root checking every hop."""
        parent = await repository.find_by_id(parent_id)
        if parent is None:
            logfire.warn("Parent comment not found", parent_id=str(parent_id))
            raise ParentNotFoundError(str(parent_id))

        if parent.subject_id != subject_id:
            logfire.error(
                "Parent comment does not belong to subject",
                parent_id=str(parent_id),
                parent_subject_id=str(parent.subject_id),
                target_subject_id=str(subject_id),
            )
            raise BadReferenceError(
                f"Parent comment {parent_id} does not belong to subject {subject_id}"
            )

        seen = {parent.id}
        node = parent
        while node.parent_id is not None:
            if node.parent_id in seen:
                raise BadReferenceError(
                    f"Comment {node.parent_id} appears twice in its own ancestry"
                )
            ancestor = await repository.find_by_id(node.parent_id)
            if ancestor is None or ancestor.subject_id != subject_id:
                logfire.error(
                    "Broken ancestor chain",
                    parent_id=str(parent_id),
                    missing_ancestor_id=str(node.parent_id),
                )
                raise BadReferenceError(
                    f"Ancestor {node.parent_id} of comment {parent_id} is missing, "
                    "deleted or on another subject"
                )
            seen.add(ancestor.id)
            node = ancestor

    async def cascade_soft_delete(
        self, source_type: SourceType, comment_id: CommentId
    ) -> list[CommentId]:
        """Soft-delete a comment together with all of its live descendants.

        Args:
            source_type: Comment store the comment lives in
            comment_id: Comment to delete

        Returns:
            IDs of every comment deleted, including ``comment_id``

        Raises:
            NotFoundError: If the comment is missing or already deleted
        """
        with logfire.span(
            "comment_service.cascade_soft_delete",
            source_type=source_type.value,
            comment_id=str(comment_id),
        ):
            repository = self._repository(source_type)
            comment = await repository.find_by_id(comment_id)
            if comment is None:
                logfire.warn("Comment not found for delete", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))

            deleted_ids = await repository.soft_delete_tree(
                comment_id, datetime.now(timezone.utc)
            )
            logfire.info(
                "Comment subtree soft-deleted",
                source_type=source_type.value,
                comment_id=str(comment_id),
                deleted=len(deleted_ids),
            )

            self._recompute_has_child(source_type, comment.parent_id)
            return deleted_ids

    async def reparent_children_to_root(
        self, source_type: SourceType, comment_id: CommentId
    ) -> int:
        """Turn every direct child of a comment into a top-level comment.

        Args:
            source_type: Comment store the comment lives in
            comment_id: Comment whose children to detach

        Returns:
            Number of comments reparented
        """
        with logfire.span(
            "comment_service.reparent_children_to_root",
            source_type=source_type.value,
            comment_id=str(comment_id),
        ):
            count = await self._repository(source_type).reparent_children_to_root(
                comment_id
            )
            logfire.info(
                "Children reparented to root",
                comment_id=str(comment_id),
                count=count,
            )
            if count:
                self._recompute_has_child(source_type, comment_id)
            return count

    async def get_comment_by_id(
        self, source_type: SourceType, comment_id: CommentId
    ) -> Comment | None:
        """Get a live comment by ID."""
        with logfire.span(
            "comment_service.get_comment_by_id",
            source_type=source_type.value,
            comment_id=str(comment_id),
        ):
            comment = await self._repository(source_type).find_by_id(comment_id)
            if comment is None:
                logfire.warn("Comment not found", comment_id=str(comment_id))
            return comment

    async def list_comments(
        self,
        source_type: SourceType,
        subject_id: SubjectId,
        parent_id: CommentId | None = None,
        cursor: str | None = None,
        limit: int = 20,
        direction: SortDirection = SortDirection.DESC,
    ) -> CursorPage[Comment]:
        """Get one page of live comments of a subject.

        Args:
            source_type: Comment store to read
            subject_id: Subject the comments hang off
            parent_id: List replies of this comment instead of top level
            cursor: Opaque cursor from the previous page
            limit: Page size (already clamped)
            direction: Sort direction over ``(created_at, id)``

        Returns:
            Page of comments
        """
        with logfire.span(
            "comment_service.list_comments",
            source_type=source_type.value,
            subject_id=str(subject_id),
            parent_id=str(parent_id) if parent_id else None,
            limit=limit,
            direction=direction.value,
        ):
            page = await self._repository(source_type).find_page(
                subject_id=subject_id,
                parent_id=parent_id,
                cursor=cursor,
                limit=limit,
                direction=direction,
            )
            logfire.info(
                "Comments listed",
                count=len(page.data),
                has_more=page.has_more,
            )
            return page
