"""Post repository interface."""

from abc import abstractmethod
from typing import Optional

from board.domain.model.post import Post
from board.domain.repository.source import OwnedRecordSource
from board.domain.value import PostId, SourceType


class PostRepository(OwnedRecordSource):
    """Repository for Post entity.

    Implementations live in the infrastructure layer.
    """

    source_type = SourceType.POST

    @abstractmethod
    async def find_by_id(
        self, post_id: PostId, include_deleted: bool = False
    ) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier
            include_deleted: Whether a soft-deleted post may be returned

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a post (create or update)."""
        pass
