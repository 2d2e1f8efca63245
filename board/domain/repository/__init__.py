"""Repository interfaces for board domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from board.domain.repository.comment import (
    CommentRepository,
    PostCommentRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
)
from board.domain.repository.comment_store import CommentStoreFactory
from board.domain.repository.post import PostRepository
from board.domain.repository.projection import (
    ProjectionRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.repository.source import OwnedRecordSource
from board.domain.repository.transaction import AfterCommit

__all__ = [
    "AfterCommit",
    "CommentRepository",
    "CommentStoreFactory",
    "OwnedRecordSource",
    "PostCommentRepository",
    "PostRepository",
    "ProjectionRepository",
    "ScamReportCommentRepository",
    "SiteReviewCommentRepository",
    "UserCommentRepository",
    "UserPostRepository",
]
