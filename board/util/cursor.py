"""Keyset (cursor) pagination helpers.

A cursor is the last returned row's sort value and primary key, serialized
as URL-safe base64 JSON. Clients must treat it as an opaque string and hand
it back unmodified.

Every page is ordered by ``(sort_value, id)``; the primary key tiebreaker is
immutable, so rows inserted ahead of the cursor while a client is paging
neither repeat nor push unseen rows out of reach.
"""

import base64
from datetime import datetime
from typing import Callable, Generic, Sequence, TypeVar
from uuid import UUID

import logfire
from pydantic import BaseModel, ConfigDict, Field

from board.domain.value import SortDirection

T = TypeVar("T")


class CursorPosition(BaseModel):
    """Decoded cursor: where the previous page stopped."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID
    sort_value: datetime = Field(alias="sortValue")


class CursorPage(BaseModel, Generic[T]):
    """One page of a cursor-paginated listing."""

    data: list[T]
    next_cursor: str | None = None
    has_more: bool = False


def encode_cursor(last_id: UUID, last_sort_value: datetime) -> str:
    """Encode the last row of a page as an opaque cursor.

    Args:
        last_id: Primary key of the last returned row
        last_sort_value: Sort field value of the last returned row

    Returns:
        URL-safe cursor string
    """
    position = CursorPosition(id=last_id, sort_value=last_sort_value)
    raw = position.model_dump_json(by_alias=True).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(cursor: str | None) -> CursorPosition | None:
    """Decode a cursor produced by :func:`encode_cursor`.

    Never raises: a missing or malformed cursor yields None, which callers
    treat as "start from the beginning".
    """
    if not cursor:
        return None

    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return CursorPosition.model_validate_json(raw)
    except (ValueError, TypeError) as e:
        logfire.debug("Ignoring malformed cursor", cursor=cursor, error=str(e))
        return None


def clamp_limit(limit: int | None, default: int = 20, maximum: int = 50) -> int:
    """Bound a requested page size to ``1..maximum``."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))


def is_after(
    sort_value: datetime,
    row_id: UUID,
    position: CursorPosition,
    direction: SortDirection,
) -> bool:
    """Whether a row comes strictly after the cursor in the given order.

    In-memory twin of the SQL keyset predicate built by
    ``board.persistence.pagination.keyset_condition``.
    """
    if direction is SortDirection.DESC:
        return sort_value < position.sort_value or (
            sort_value == position.sort_value and row_id < position.id
        )
    return sort_value > position.sort_value or (
        sort_value == position.sort_value and row_id > position.id
    )


def build_page(
    rows: Sequence[T],
    limit: int,
    position_of: Callable[[T], tuple[UUID, datetime]],
) -> CursorPage[T]:
    """Turn ``limit + 1`` fetched rows into a page.

    The extra row only signals that another page exists and is dropped.

    Args:
        rows: Rows fetched with ``LIMIT limit + 1`` in page order
        limit: Requested page size
        position_of: Extracts ``(id, sort_value)`` from a row

    Returns:
        Page with ``next_cursor`` set only when more rows remain
    """
    has_more = len(rows) > limit
    data = list(rows[:limit])

    next_cursor = None
    if has_more and data:
        last_id, last_sort_value = position_of(data[-1])
        next_cursor = encode_cursor(last_id, last_sort_value)

    return CursorPage(data=data, next_cursor=next_cursor, has_more=has_more)
