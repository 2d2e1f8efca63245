"""Domain value objects for board.

Value objects are immutable and defined by their values, not identity.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from board.domain.value.common import ValueObject
from board.domain.value.identifiers import UserId


class SourceType(str, Enum):
    """Independently stored source table that feeds a per-user projection.

    The three comment values are also what ``user_comments.comment_type``
    stores, so they must not change.
    """

    POST_COMMENT = "post_comment"
    SITE_REVIEW_COMMENT = "site_review_comment"
    SCAM_REPORT_COMMENT = "scam_report_comment"
    POST = "post"


COMMENT_SOURCE_TYPES: tuple[SourceType, ...] = (
    SourceType.POST_COMMENT,
    SourceType.SITE_REVIEW_COMMENT,
    SourceType.SCAM_REPORT_COMMENT,
)


class SortDirection(str, Enum):
    """Ordering of a cursor-paginated listing."""

    ASC = "asc"
    DESC = "desc"


class SourceRecord(ValueObject):
    """Ownership and lifecycle facts of one source row.

    This is all the reconciler needs from a comment or post store.
    """

    id: UUID
    user_id: UserId
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_deleted(self) -> bool:
        """Whether the source row is soft-deleted."""
        return self.deleted_at is not None
