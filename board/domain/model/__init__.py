"""Domain model entities for board."""

from board.domain.model.comment import Comment
from board.domain.model.post import Post
from board.domain.model.projection import Projection

__all__ = [
    "Comment",
    "Post",
    "Projection",
]
