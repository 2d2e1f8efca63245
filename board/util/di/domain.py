"""Domain layer DI providers."""

from dishka import Scope, provide

from board.config import AuthSettings
from board.domain.repository import (
    AfterCommit,
    CommentRepository,
    CommentStoreFactory,
    PostRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.service import (
    CommentService,
    HasChildUpdater,
    JWTService,
    ReconciliationService,
)
from board.domain.value import SourceType
from board.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session
    lifecycle. The has-child updater is the exception: its runs outlive
    the request that scheduled them, so it lives for the whole app.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_has_child_updater(self, comment_stores: CommentStoreFactory) -> HasChildUpdater:
        """Provide background has-child updater."""
        return HasChildUpdater(comment_stores=comment_stores)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_comment_service(
        self,
        comment_repositories: dict[SourceType, CommentRepository],
        has_child_updater: HasChildUpdater,
        after_commit: AfterCommit,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repositories=comment_repositories,
            has_child_updater=has_child_updater,
            after_commit=after_commit,
        )

    @provide
    def get_reconciliation_service(
        self,
        comment_repositories: dict[SourceType, CommentRepository],
        post_repository: PostRepository,
        user_comment_repository: UserCommentRepository,
        user_post_repository: UserPostRepository,
    ) -> ReconciliationService:
        """Provide projection reconciliation domain service."""
        return ReconciliationService(
            comment_repositories=comment_repositories,
            post_repository=post_repository,
            user_comment_repository=user_comment_repository,
            user_post_repository=user_post_repository,
        )
