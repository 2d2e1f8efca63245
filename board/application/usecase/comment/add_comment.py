"""Add comment use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from board.application.usecase.base import BaseUseCase
from board.domain.error import NotFoundError
from board.domain.repository import PostRepository
from board.domain.service import CommentService
from board.domain.value import CommentId, PostId, SourceType, SubjectId, UserId

from .list_comments import CommentItem


class AddCommentRequest(BaseModel):
    """Add comment request."""

    source_type: SourceType
    subject_id: str  # UUID string
    author_id: str  # User ID from authenticated user
    content: str = Field(min_length=1, max_length=10000)
    parent_id: str | None = None  # Parent comment ID for replies


class AddCommentResponse(BaseModel):
    """Add comment response."""

    comment: CommentItem


class AddCommentUseCase(BaseUseCase):
    """Use case for commenting on a subject or replying to another comment."""

    def __init__(
        self, comment_service: CommentService, post_repository: PostRepository
    ) -> None:
        """Initialize add comment use case.

        Args:
            comment_service: Comment domain service
            post_repository: Used to check that a commented post is live
        """
        self.comment_service = comment_service
        self.post_repository = post_repository

    async def execute(self, request: AddCommentRequest) -> AddCommentResponse:
        """Execute add comment flow.

        Posts live in this database and are checked; site reviews and scam
        reports are owned elsewhere and taken at face value.

        Raises:
            NotFoundError: If the commented post or the parent is missing
            BadReferenceError: If the parent cannot take replies on this subject
        """
        subject_id = SubjectId(UUID(request.subject_id))

        if request.source_type is SourceType.POST_COMMENT:
            post = await self.post_repository.find_by_id(PostId(subject_id))
            if post is None:
                raise NotFoundError("Post", request.subject_id)

        comment = await self.comment_service.create_comment(
            source_type=request.source_type,
            subject_id=subject_id,
            author_id=UserId(UUID(request.author_id)),
            content=request.content,
            parent_id=CommentId(UUID(request.parent_id)) if request.parent_id else None,
        )

        return AddCommentResponse(comment=CommentItem.from_comment(comment))
