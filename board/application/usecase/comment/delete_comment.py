"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from board.application.usecase.base import BaseUseCase
from board.domain.error import NotAuthorizedError, NotFoundError
from board.domain.service import CommentService
from board.domain.value import CommentId, SourceType


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    source_type: SourceType
    subject_id: str  # UUID string
    comment_id: str  # UUID string
    user_id: str  # User ID from authenticated user


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    deleted_ids: list[str]


class DeleteCommentUseCase(BaseUseCase):
    """Use case for deleting a comment together with its replies."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            NotFoundError: If the comment is missing, deleted or not on the subject
            NotAuthorizedError: If the user is not the comment's author
        """
        comment_id = CommentId(UUID(request.comment_id))

        comment = await self.comment_service.get_comment_by_id(
            request.source_type, comment_id
        )
        if comment is None or str(comment.subject_id) != request.subject_id:
            raise NotFoundError("Comment", request.comment_id)

        if str(comment.author_id) != request.user_id:
            raise NotAuthorizedError("comment", request.comment_id, request.user_id)

        deleted = await self.comment_service.cascade_soft_delete(
            request.source_type, comment_id
        )
        return DeleteCommentResponse(deleted_ids=[str(cid) for cid in deleted])
