"""Per-user projection rows.

``user_comments`` and ``user_posts`` mirror, per user, which comments and
posts that user owns across every source table. Rows are written only by
the reconciliation job and carry the timestamps of their source row.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from board.domain.model.common import DomainModel
from board.domain.value import ProjectionId, SourceRecord, SourceType, UserId


class Projection(DomainModel):
    """One row of a per-user projection table.

    Identity within a table is ``(user_id, source_type, source_id)``.
    """

    id: ProjectionId
    user_id: UserId
    source_type: SourceType
    source_id: UUID
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[SourceType, UUID]:
        """Per-user identity of the source row this projection mirrors."""
        return (self.source_type, self.source_id)

    @property
    def is_deleted(self) -> bool:
        """Whether the projection row is soft-deleted."""
        return self.deleted_at is not None

    def mirrors(self, record: SourceRecord) -> bool:
        """Whether timestamps and delete state already match the source."""
        return (
            self.created_at == record.created_at
            and self.updated_at == record.updated_at
            and self.deleted_at == record.deleted_at
        )
