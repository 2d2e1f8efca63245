"""Post entity.

Only the fields the comment trees and the user projections rely on are
modelled here; the rest of the post lifecycle lives outside this core.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from board.domain.model.common import DomainModel
from board.domain.value import PostId, UserId


class Post(DomainModel):
    """Post owned by a user."""

    id: PostId
    author_id: UserId
    title: str = Field(min_length=1, max_length=300)
    content: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    deleted_at: Optional[datetime] = None
