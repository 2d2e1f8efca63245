"""Application layer DI providers."""

from dishka import Scope, provide

from board.application.usecase.comment import (
    AddCommentUseCase,
    DeleteCommentUseCase,
    ListCommentsUseCase,
)
from board.application.usecase.projection import SyncUserUseCase
from board.config import PaginationSettings
from board.domain.repository import PostRepository
from board.domain.service import CommentService, ReconciliationService
from board.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Comment use cases
    @provide(scope=Scope.REQUEST)
    def get_add_comment_use_case(
        self, comment_service: CommentService, post_repository: PostRepository
    ) -> AddCommentUseCase:
        """Provide add comment use case."""
        return AddCommentUseCase(
            comment_service=comment_service, post_repository=post_repository
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_list_comments_use_case(
        self, comment_service: CommentService, pagination: PaginationSettings
    ) -> ListCommentsUseCase:
        """Provide list comments use case."""
        return ListCommentsUseCase(
            comment_service=comment_service, pagination=pagination
        )

    # Projection use cases
    @provide(scope=Scope.REQUEST)
    def get_sync_user_use_case(
        self, reconciliation_service: ReconciliationService
    ) -> SyncUserUseCase:
        """Provide projection sync use case."""
        return SyncUserUseCase(reconciliation_service=reconciliation_service)
