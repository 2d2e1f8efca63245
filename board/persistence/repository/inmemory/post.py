"""In-memory post repository for testing."""

from typing import Optional

from board.domain.model.post import Post
from board.domain.repository.post import PostRepository
from board.domain.value import PostId, SourceRecord, UserId


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self) -> None:
        self._posts: dict[PostId, Post] = {}

    async def find_by_id(
        self, post_id: PostId, include_deleted: bool = False
    ) -> Optional[Post]:
        """Find a post by ID."""
        post = self._posts.get(post_id)
        if post is None or (post.deleted_at is not None and not include_deleted):
            return None
        return post

    async def list_for_user_including_deleted(
        self, user_id: UserId
    ) -> list[SourceRecord]:
        """List every post a user wrote, soft-deleted ones included."""
        return [
            SourceRecord(
                id=p.id,
                user_id=p.author_id,
                created_at=p.created_at,
                updated_at=p.updated_at,
                deleted_at=p.deleted_at,
            )
            for p in self._posts.values()
            if p.author_id == user_id
        ]

    async def save(self, post: Post) -> Post:
        """Save or update a post."""
        self._posts[post.id] = post
        return post
