"""Sync per-user projections use case."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from board.application.usecase.base import BaseUseCase
from board.domain.service import ReconcileStats, ReconciliationService
from board.domain.value import UserId


class ProjectionTarget(str, Enum):
    """Projection table to reconcile."""

    USER_COMMENTS = "user_comments"
    USER_POSTS = "user_posts"


class SyncUserRequest(BaseModel):
    """Sync user projections request."""

    user_id: str  # UUID string
    targets: list[ProjectionTarget] = [
        ProjectionTarget.USER_COMMENTS,
        ProjectionTarget.USER_POSTS,
    ]


class SyncStats(BaseModel):
    """Counters of one reconciled projection table."""

    created: int
    updated: int
    soft_deleted: int
    failed: int
    found: dict[str, int]

    @classmethod
    def from_stats(cls, stats: ReconcileStats) -> "SyncStats":
        return cls(
            created=stats.created,
            updated=stats.updated,
            soft_deleted=stats.soft_deleted,
            failed=stats.failed,
            found={t.value: n for t, n in stats.found.items()},
        )


class SyncUserResponse(BaseModel):
    """Sync user projections response."""

    user_id: str
    results: dict[ProjectionTarget, SyncStats]

    @property
    def failed(self) -> int:
        """Rows that could not be reconciled across all tables."""
        return sum(r.failed for r in self.results.values())


class SyncUserUseCase(BaseUseCase):
    """Use case for reconciling the projection tables of one user."""

    def __init__(self, reconciliation_service: ReconciliationService) -> None:
        self.reconciliation_service = reconciliation_service

    async def execute(self, request: SyncUserRequest) -> SyncUserResponse:
        """Execute sync flow, one table after the other.

        Raises:
            StorageUnavailableError: If storage is lost mid-run
        """
        user_id = UserId(UUID(request.user_id))
        results: dict[ProjectionTarget, SyncStats] = {}

        for target in request.targets:
            if target is ProjectionTarget.USER_COMMENTS:
                stats = await self.reconciliation_service.sync_user_comments(user_id)
            else:
                stats = await self.reconciliation_service.sync_user_posts(user_id)
            results[target] = SyncStats.from_stats(stats)

        return SyncUserResponse(user_id=request.user_id, results=results)
