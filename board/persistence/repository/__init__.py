"""PostgreSQL repository implementations."""

from board.persistence.repository.comment import (
    PostgresCommentRepository,
    PostgresPostCommentRepository,
    PostgresScamReportCommentRepository,
    PostgresSiteReviewCommentRepository,
)
from board.persistence.repository.comment_store import PostgresCommentStoreFactory
from board.persistence.repository.post import PostgresPostRepository
from board.persistence.repository.projection import (
    PostgresProjectionRepository,
    PostgresUserCommentRepository,
    PostgresUserPostRepository,
)

__all__ = [
    "PostgresCommentRepository",
    "PostgresCommentStoreFactory",
    "PostgresPostCommentRepository",
    "PostgresPostRepository",
    "PostgresProjectionRepository",
    "PostgresScamReportCommentRepository",
    "PostgresSiteReviewCommentRepository",
    "PostgresUserCommentRepository",
    "PostgresUserPostRepository",
]
