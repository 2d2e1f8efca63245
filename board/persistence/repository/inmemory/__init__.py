"""In-memory repository implementations for testing."""

from .comment import (
    InMemoryCommentRepository,
    InMemoryPostCommentRepository,
    InMemoryScamReportCommentRepository,
    InMemorySiteReviewCommentRepository,
)
from .comment_store import InMemoryCommentStoreFactory
from .post import InMemoryPostRepository
from .projection import (
    DuplicateProjectionError,
    InMemoryProjectionRepository,
    InMemoryUserCommentRepository,
    InMemoryUserPostRepository,
)
from .transaction import ImmediateAfterCommit

__all__ = [
    "DuplicateProjectionError",
    "ImmediateAfterCommit",
    "InMemoryCommentRepository",
    "InMemoryCommentStoreFactory",
    "InMemoryPostCommentRepository",
    "InMemoryPostRepository",
    "InMemoryProjectionRepository",
    "InMemoryScamReportCommentRepository",
    "InMemorySiteReviewCommentRepository",
    "InMemoryUserCommentRepository",
    "InMemoryUserPostRepository",
]
