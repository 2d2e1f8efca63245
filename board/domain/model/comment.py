"""Comment entity.

Comments are threaded discussions hanging off a subject (a post, a site
review or a scam report). Each subject type keeps its comments in its own
table; the shape of a node is the same in all three.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from board.domain.model.common import DomainModel
from board.domain.value import CommentId, SubjectId, UserId


class Comment(DomainModel):
    """Comment tree node.

    Threading is managed through ``parent_id`` (None for top-level). A
    parent always belongs to the same subject as its children.

    ``has_child`` is a cached answer to "does this node have live replies".
    It is recomputed in the background after every mutation touching the
    node's children and may be briefly stale.
    """

    id: CommentId
    subject_id: SubjectId
    author_id: UserId
    content: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    has_child: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        """Whether the comment is soft-deleted."""
        return self.deleted_at is not None
