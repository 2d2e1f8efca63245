"""Owned record source interface."""

from abc import ABC, abstractmethod
from typing import ClassVar, List

from board.domain.value import SourceRecord, SourceType, UserId


class OwnedRecordSource(ABC):
    """A table whose rows are owned by users and mirrored per user.

    Every comment store and the post store implement this so the
    reconciliation job can read them uniformly.
    """

    source_type: ClassVar[SourceType]

    @abstractmethod
    async def list_for_user_including_deleted(
        self, user_id: UserId
    ) -> List[SourceRecord]:
        """List every row owned by a user, soft-deleted rows included.

        Args:
            user_id: Owner of the rows

        Returns:
            Ownership and lifecycle facts of each row
        """
        pass
