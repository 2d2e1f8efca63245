"""Keyset pagination clauses for SQLAlchemy Core selects."""

from sqlalchemy import ColumnElement, Select, and_, or_

from board.domain.value import SortDirection
from board.util.cursor import CursorPosition, decode_cursor


def keyset_condition(
    sort_column: ColumnElement,
    id_column: ColumnElement,
    position: CursorPosition,
    direction: SortDirection,
) -> ColumnElement[bool]:
    """Rows strictly after ``position`` in ``(sort_column, id_column)`` order.

    Expanded instead of a row-value comparison so mixed-direction indexes
    and non-Postgres dialects behave the same.
    """
    if direction is SortDirection.DESC:
        return or_(
            sort_column < position.sort_value,
            and_(sort_column == position.sort_value, id_column < position.id),
        )
    return or_(
        sort_column > position.sort_value,
        and_(sort_column == position.sort_value, id_column > position.id),
    )


def apply_keyset(
    stmt: Select,
    sort_column: ColumnElement,
    id_column: ColumnElement,
    cursor: str | None,
    limit: int,
    direction: SortDirection,
) -> Select:
    """Add cursor filter, total ordering and ``LIMIT limit + 1`` to a select.

    A malformed cursor is treated as no cursor.
    """
    position = decode_cursor(cursor)
    if position is not None:
        stmt = stmt.where(keyset_condition(sort_column, id_column, position, direction))

    if direction is SortDirection.DESC:
        stmt = stmt.order_by(sort_column.desc(), id_column.desc())
    else:
        stmt = stmt.order_by(sort_column.asc(), id_column.asc())

    return stmt.limit(limit + 1)
