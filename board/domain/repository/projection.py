"""Per-user projection repository interfaces."""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional
from uuid import UUID

from board.domain.model.projection import Projection
from board.domain.value import COMMENT_SOURCE_TYPES, SourceType, UserId


class ProjectionRepository(ABC):
    """Repository for one per-user projection table.

    Reads always see soft-deleted rows too: the reconciler has to know
    about them to restore rather than duplicate.
    """

    # Source types this table can hold
    source_types: ClassVar[tuple[SourceType, ...]]

    @abstractmethod
    async def find_by_key(
        self, user_id: UserId, source_type: SourceType, source_id: UUID
    ) -> Optional[Projection]:
        """Find the projection of one source row, deleted or not.

        Args:
            user_id: Owner of the source row
            source_type: Store the source row lives in
            source_id: Primary key of the source row

        Returns:
            The projection row if one exists
        """
        pass

    @abstractmethod
    async def find_all_for_user(
        self, user_id: UserId, include_deleted: bool = True
    ) -> List[Projection]:
        """List every projection row of a user."""
        pass

    @abstractmethod
    async def create(self, projection: Projection) -> Projection:
        """Insert a new projection row.

        Raises:
            Exception: Implementation specific, if the
                ``(user_id, source_type, source_id)`` key already exists
        """
        pass

    @abstractmethod
    async def update(self, projection: Projection) -> Projection:
        """Overwrite timestamps and delete state of an existing row."""
        pass

    @abstractmethod
    async def checkpoint(self) -> None:
        """Make every change applied so far durable.

        Called after each reconciled row so a later failure cannot undo
        rows that already converged.
        """
        pass

    @abstractmethod
    async def discard(self) -> None:
        """Drop changes made since the last checkpoint."""
        pass


class UserCommentRepository(ProjectionRepository):
    """``user_comments``: every comment a user wrote, across all stores."""

    source_types = COMMENT_SOURCE_TYPES


class UserPostRepository(ProjectionRepository):
    """``user_posts``: every post a user wrote."""

    source_types = (SourceType.POST,)
