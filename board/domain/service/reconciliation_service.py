"""Per-user projection reconciliation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Mapping, Sequence
from uuid import uuid4

import logfire

from board.domain.error import StorageUnavailableError
from board.domain.model.projection import Projection
from board.domain.repository import (
    CommentRepository,
    OwnedRecordSource,
    PostRepository,
    ProjectionRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.value import (
    COMMENT_SOURCE_TYPES,
    ProjectionId,
    SourceRecord,
    SourceType,
    UserId,
)

from .base import Service


class RowOutcome(str, Enum):
    """What reconciling one projection row did."""

    CREATED = "created"
    CREATED_DELETED = "created_deleted"
    UPDATED = "updated"
    SOFT_DELETED = "soft_deleted"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class ReconcileStats:
    """Counters reported by one reconciliation run."""

    created: int = 0
    updated: int = 0
    soft_deleted: int = 0
    failed: int = 0
    found: dict[SourceType, int] = field(default_factory=dict)

    def record(self, outcome: RowOutcome) -> None:
        """Count the outcome of one row."""
        if outcome is RowOutcome.CREATED:
            self.created += 1
        elif outcome is RowOutcome.CREATED_DELETED:
            self.created += 1
            self.soft_deleted += 1
        elif outcome is RowOutcome.UPDATED:
            self.updated += 1
        elif outcome is RowOutcome.SOFT_DELETED:
            self.soft_deleted += 1
        elif outcome is RowOutcome.FAILED:
            self.failed += 1

    @property
    def total_found(self) -> int:
        """Source rows seen across all sources."""
        return sum(self.found.values())

    @property
    def changed(self) -> bool:
        """Whether the run wrote anything."""
        return bool(self.created or self.updated or self.soft_deleted)


class ReconciliationService(Service):
    """Keeps ``user_comments`` and ``user_posts`` in line with their sources.

    Every run re-reads all source rows of one user, soft-deleted ones
    included, and converges the projection rows on them. Nothing is derived
    from previous runs, so running twice with no source change writes
    nothing the second time. Rows are committed one at a time: a crash
    leaves a partially converged table that the next run completes.

    There is no per-user lock. Two concurrent runs for the same user may
    interleave; for an infrequent batch job this is accepted.
    """

    def __init__(
        self,
        comment_repositories: Mapping[SourceType, CommentRepository],
        post_repository: PostRepository,
        user_comment_repository: UserCommentRepository,
        user_post_repository: UserPostRepository,
    ) -> None:
        """Initialize reconciliation service.

        Args:
            comment_repositories: Comment store per comment source type
            post_repository: Post store
            user_comment_repository: ``user_comments`` projection
            user_post_repository: ``user_posts`` projection
        """
        self.comment_repositories = comment_repositories
        self.post_repository = post_repository
        self.user_comment_repository = user_comment_repository
        self.user_post_repository = user_post_repository

    async def sync_user_comments(self, user_id: UserId) -> ReconcileStats:
        """Reconcile ``user_comments`` of a user against all comment stores."""
        sources = [self.comment_repositories[t] for t in COMMENT_SOURCE_TYPES]
        return await self.reconcile(user_id, sources, self.user_comment_repository)

    async def sync_user_posts(self, user_id: UserId) -> ReconcileStats:
        """Reconcile ``user_posts`` of a user against the post store."""
        return await self.reconcile(
            user_id, [self.post_repository], self.user_post_repository
        )

    async def sync_user(self, user_id: UserId) -> dict[str, ReconcileStats]:
        """Reconcile both projection tables of a user."""
        return {
            "user_comments": await self.sync_user_comments(user_id),
            "user_posts": await self.sync_user_posts(user_id),
        }

    async def reconcile(
        self,
        user_id: UserId,
        sources: Sequence[OwnedRecordSource],
        projections: ProjectionRepository,
    ) -> ReconcileStats:
        """Converge one projection table on a set of sources for a user.

        Args:
            user_id: User whose rows to reconcile
            sources: Source stores feeding the projection table
            projections: Projection table to write

        Returns:
            Counters of what changed

        Raises:
            ValueError: If a source does not belong in the projection table
            StorageUnavailableError: If storage is lost mid-run
        """
        covered = {source.source_type for source in sources}
        unsupported = covered - set(projections.source_types)
        if unsupported:
            raise ValueError(
                f"Projection does not hold sources: {sorted(t.value for t in unsupported)}"
            )

        with logfire.span(
            "reconciliation_service.reconcile",
            user_id=str(user_id),
            sources=[t.value for t in covered],
        ):
            stats = ReconcileStats()
            seen: set[tuple[SourceType, object]] = set()

            for source in sources:
                # A failed read aborts the run: pruning against a partial
                # view would soft-delete rows whose source still exists.
                records = await source.list_for_user_including_deleted(user_id)
                stats.found[source.source_type] = len(records)
                logfire.info(
                    "Fetched source rows",
                    user_id=str(user_id),
                    source_type=source.source_type.value,
                    count=len(records),
                )

                for record in records:
                    seen.add((source.source_type, record.id))
                    outcome = await self._isolated(
                        projections,
                        self._reconcile_row(
                            projections, user_id, source.source_type, record
                        ),
                        source_type=source.source_type,
                        source_id=record.id,
                    )
                    stats.record(outcome)

            live = await projections.find_all_for_user(user_id, include_deleted=False)
            orphans = [
                row for row in live if row.source_type in covered and row.key not in seen
            ]
            for orphan in orphans:
                outcome = await self._isolated(
                    projections,
                    self._prune_orphan(projections, orphan),
                    source_type=orphan.source_type,
                    source_id=orphan.source_id,
                )
                stats.record(outcome)

            logfire.info(
                "Reconciliation completed",
                user_id=str(user_id),
                found=stats.total_found,
                created=stats.created,
                updated=stats.updated,
                soft_deleted=stats.soft_deleted,
                failed=stats.failed,
                orphans=len(orphans),
            )
            return stats

    async def _isolated(
        self,
        projections: ProjectionRepository,
        step: Awaitable[RowOutcome],
        source_type: SourceType,
        source_id: object,
    ) -> RowOutcome:
        """Run and commit one row step; row failures are logged and skipped."""
        try:
            outcome = await step
            await projections.checkpoint()
            return outcome
        except StorageUnavailableError:
            raise
        except Exception:
            logfire.exception(
                "Failed to reconcile projection row",
                source_type=source_type.value,
                source_id=str(source_id),
            )
            await projections.discard()
            return RowOutcome.FAILED

    async def _reconcile_row(
        self,
        projections: ProjectionRepository,
        user_id: UserId,
        source_type: SourceType,
        record: SourceRecord,
    ) -> RowOutcome:
        existing = await projections.find_by_key(user_id, source_type, record.id)

        if existing is None:
            # A dead source never gets a live projection, not even briefly
            await projections.create(
                Projection(
                    id=ProjectionId(uuid4()),
                    user_id=record.user_id,
                    source_type=source_type,
                    source_id=record.id,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                    deleted_at=record.deleted_at,
                )
            )
            return (
                RowOutcome.CREATED_DELETED if record.is_deleted else RowOutcome.CREATED
            )

        if existing.mirrors(record):
            return RowOutcome.UNCHANGED

        await projections.update(
            existing.model_copy(
                update={
                    "created_at": record.created_at,
                    "updated_at": record.updated_at,
                    "deleted_at": record.deleted_at,
                }
            )
        )
        if record.is_deleted and not existing.is_deleted:
            return RowOutcome.SOFT_DELETED
        return RowOutcome.UPDATED

    async def _prune_orphan(
        self, projections: ProjectionRepository, orphan: Projection
    ) -> RowOutcome:
        await projections.update(
            orphan.model_copy(update={"deleted_at": datetime.now(timezone.utc)})
        )
        logfire.info(
            "Orphaned projection soft-deleted",
            projection_id=str(orphan.id),
            source_type=orphan.source_type.value,
            source_id=str(orphan.source_id),
        )
        return RowOutcome.SOFT_DELETED
