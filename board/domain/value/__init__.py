"""Domain value objects for board."""

from board.domain.value.identifiers import (
    CommentId,
    PostId,
    ProjectionId,
    SubjectId,
    UserId,
)
from board.domain.value.types import (
    COMMENT_SOURCE_TYPES,
    SortDirection,
    SourceRecord,
    SourceType,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "SubjectId",
    "ProjectionId",
    # Types
    "COMMENT_SOURCE_TYPES",
    "SortDirection",
    "SourceRecord",
    "SourceType",
]
