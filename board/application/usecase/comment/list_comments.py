"""List comments use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from board.application.usecase.base import BaseUseCase
from board.config import PaginationSettings
from board.domain.model import Comment
from board.domain.service import CommentService
from board.domain.value import CommentId, SortDirection, SourceType, SubjectId
from board.util.cursor import clamp_limit


class CommentItem(BaseModel):
    """Comment item in response."""

    comment_id: str
    subject_id: str
    author_id: str
    content: str
    parent_id: str | None
    has_child: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentItem":
        return cls(
            comment_id=str(comment.id),
            subject_id=str(comment.subject_id),
            author_id=str(comment.author_id),
            content=comment.content,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            has_child=comment.has_child,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class ListCommentsRequest(BaseModel):
    """List comments request."""

    source_type: SourceType
    subject_id: str  # UUID string
    parent_id: str | None = None  # List replies of this comment instead
    cursor: str | None = None
    limit: int | None = None
    direction: SortDirection = SortDirection.DESC


class ListCommentsResponse(BaseModel):
    """List comments response."""

    comments: list[CommentItem]
    next_cursor: str | None
    has_more: bool


class ListCommentsUseCase(BaseUseCase):
    """Use case for reading one page of a comment level."""

    def __init__(
        self, comment_service: CommentService, pagination: PaginationSettings
    ) -> None:
        """Initialize list comments use case.

        Args:
            comment_service: Comment domain service
            pagination: Default and maximum page size
        """
        self.comment_service = comment_service
        self.pagination = pagination

    async def execute(self, request: ListCommentsRequest) -> ListCommentsResponse:
        """Execute list comments flow.

        The page size is clamped to the configured range; an unreadable
        cursor restarts from the first page.
        """
        limit = clamp_limit(
            request.limit,
            default=self.pagination.default_limit,
            maximum=self.pagination.max_limit,
        )

        page = await self.comment_service.list_comments(
            source_type=request.source_type,
            subject_id=SubjectId(UUID(request.subject_id)),
            parent_id=CommentId(UUID(request.parent_id)) if request.parent_id else None,
            cursor=request.cursor,
            limit=limit,
            direction=request.direction,
        )

        return ListCommentsResponse(
            comments=[CommentItem.from_comment(c) for c in page.data],
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )
