"""In-memory projection repositories for testing.

Writes are staged until ``checkpoint``; ``discard`` drops them, mirroring
commit and rollback of the PostgreSQL implementation.
"""

from typing import Optional
from uuid import UUID

from board.domain.model.projection import Projection
from board.domain.repository.projection import (
    ProjectionRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.value import ProjectionId, SourceType, UserId


class DuplicateProjectionError(Exception):
    """A second projection row for the same source row."""

    pass


class InMemoryProjectionRepository(ProjectionRepository):
    """In-memory implementation shared by both projection tables."""

    def __init__(self) -> None:
        self._committed: dict[ProjectionId, Projection] = {}
        self._working: dict[ProjectionId, Projection] = {}

    @property
    def rows(self) -> list[Projection]:
        """Committed rows, for assertions."""
        return list(self._committed.values())

    async def find_by_key(
        self, user_id: UserId, source_type: SourceType, source_id: UUID
    ) -> Optional[Projection]:
        """Find the projection of one source row, deleted or not."""
        for row in self._working.values():
            if row.user_id == user_id and row.key == (source_type, source_id):
                return row
        return None

    async def find_all_for_user(
        self, user_id: UserId, include_deleted: bool = True
    ) -> list[Projection]:
        """List every projection row of a user."""
        rows = [r for r in self._working.values() if r.user_id == user_id]
        if not include_deleted:
            rows = [r for r in rows if not r.is_deleted]
        rows.sort(key=lambda r: (r.created_at, r.id))
        return rows

    async def create(self, projection: Projection) -> Projection:
        """Insert a new projection row.

        Raises:
            DuplicateProjectionError: If the source row already has one
        """
        existing = await self.find_by_key(
            projection.user_id, projection.source_type, projection.source_id
        )
        if existing is not None:
            raise DuplicateProjectionError(
                f"Projection exists for {projection.source_type.value} "
                f"{projection.source_id}"
            )
        self._working[projection.id] = projection
        return projection

    async def update(self, projection: Projection) -> Projection:
        """Overwrite timestamps and delete state of an existing row."""
        current = self._working[projection.id]
        self._working[projection.id] = current.model_copy(
            update={
                "created_at": projection.created_at,
                "updated_at": projection.updated_at,
                "deleted_at": projection.deleted_at,
            }
        )
        return self._working[projection.id]

    async def checkpoint(self) -> None:
        """Commit staged writes."""
        self._committed = dict(self._working)

    async def discard(self) -> None:
        """Drop staged writes."""
        self._working = dict(self._committed)


class InMemoryUserCommentRepository(InMemoryProjectionRepository, UserCommentRepository):
    """In-memory ``user_comments``."""


class InMemoryUserPostRepository(InMemoryProjectionRepository, UserPostRepository):
    """In-memory ``user_posts``."""
