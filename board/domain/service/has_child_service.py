"""Has-child flag maintenance."""

import asyncio

import logfire

from board.domain.repository import CommentStoreFactory
from board.domain.value import CommentId, SourceType

from .base import Service


class HasChildUpdater(Service):
    """Recomputes the cached ``has_child`` flag of parent comments.

    Runs are detached from the request that triggered them and each one
    opens its own unit of work. A run derives the flag from the current
    rows instead of applying a delta, so duplicate or out-of-order runs for
    the same parent all converge on the right value.
    """

    def __init__(self, comment_stores: CommentStoreFactory) -> None:
        """Initialize has-child updater.

        Args:
            comment_stores: Opens comment stores on a fresh unit of work
        """
        self.comment_stores = comment_stores
        self._pending: set[asyncio.Task[None]] = set()

    def schedule(self, source_type: SourceType, parent_id: CommentId | None) -> None:
        """Recompute a parent's flag in the background.

        Returns immediately. The only visible effect of a failed run is a
        log entry.

        Args:
            source_type: Comment store the parent lives in
            parent_id: Parent to recompute; None is a no-op
        """
        if parent_id is None:
            return

        task = asyncio.create_task(
            self._run(source_type, parent_id),
            name=f"has-child:{source_type.value}:{parent_id}",
        )
        # Keep a strong reference so the task is not garbage collected mid-run
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        logfire.debug(
            "Has-child recompute scheduled",
            source_type=source_type.value,
            parent_id=str(parent_id),
        )

    async def recompute(self, source_type: SourceType, parent_id: CommentId) -> bool:
        """Recompute and store a parent's flag right now.

        Args:
            source_type: Comment store the parent lives in
            parent_id: Parent comment ID

        Returns:
            The value written
        """
        with logfire.span(
            "has_child_updater.recompute",
            source_type=source_type.value,
            parent_id=str(parent_id),
        ):
            async with self.comment_stores.session() as stores:
                repository = stores[source_type]
                has_child = await repository.has_live_children(parent_id)
                await repository.set_has_child(parent_id, has_child)

            logfire.info(
                "Has-child flag updated",
                source_type=source_type.value,
                parent_id=str(parent_id),
                has_child=has_child,
            )
            return has_child

    async def drain(self) -> None:
        """Wait for every scheduled run to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    @property
    def pending(self) -> int:
        """Number of runs not yet finished."""
        return len(self._pending)

    async def _run(self, source_type: SourceType, parent_id: CommentId) -> None:
        try:
            await self.recompute(source_type, parent_id)
        except Exception:
            logfire.exception(
                "Failed to update has_child",
                source_type=source_type.value,
                parent_id=str(parent_id),
            )
