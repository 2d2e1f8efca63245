"""Provider that aggregates the comment stores by source type."""

from dishka import Scope, provide

from board.domain.repository import (
    CommentRepository,
    PostCommentRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
)
from board.domain.value import SourceType
from board.util.di.base import ProviderBase


class CommentStoreAggregatorProvider(ProviderBase):
    """Combines the three comment stores into one lookup."""

    scope = Scope.REQUEST

    @provide(scope=Scope.REQUEST)
    def get_comment_repositories(
        self,
        post_comments: PostCommentRepository,
        site_review_comments: SiteReviewCommentRepository,
        scam_report_comments: ScamReportCommentRepository,
    ) -> dict[SourceType, CommentRepository]:
        """Provide dictionary of comment stores by source type.

        Args:
            post_comments: ``post_comments`` store
            site_review_comments: ``site_review_comments`` store
            scam_report_comments: ``scam_report_comments`` store

        Returns:
            Dictionary mapping SourceType to CommentRepository
        """
        return {
            SourceType.POST_COMMENT: post_comments,
            SourceType.SITE_REVIEW_COMMENT: site_review_comments,
            SourceType.SCAM_REPORT_COMMENT: scam_report_comments,
        }
