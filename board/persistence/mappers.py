"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping. Column names follow
the legacy schema (``user_id``, ``parent_comment_id``, ``comment_type``),
domain names follow the comment tree vocabulary.
"""

from typing import Any, Dict
from uuid import UUID

from board.domain.model import Comment, Post, Projection
from board.domain.value import (
    CommentId,
    PostId,
    ProjectionId,
    SourceRecord,
    SourceType,
    SubjectId,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_comment(row: Dict[str, Any], subject_column: str) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict
        subject_column: Name of the column holding the subject ID

    Returns:
        Comment domain model
    """
    parent_id = row.get("parent_comment_id")
    return Comment(
        id=CommentId(_uuid(row["id"])),
        subject_id=SubjectId(_uuid(row[subject_column])),
        author_id=UserId(_uuid(row["user_id"])),
        content=row["content"],
        parent_id=CommentId(_uuid(parent_id)) if parent_id else None,
        has_child=row.get("has_child", False),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def comment_to_dict(comment: Comment, subject_column: str) -> Dict[str, Any]:
    """Convert Comment domain model to database dict."""
    return {
        "id": comment.id,
        subject_column: comment.subject_id,
        "parent_comment_id": comment.parent_id,
        "user_id": comment.author_id,
        "content": comment.content,
        "has_child": comment.has_child,
        "created_at": comment.created_at,
        "updated_at": comment.updated_at,
        "deleted_at": comment.deleted_at,
    }


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model."""
    return Post(
        id=PostId(_uuid(row["id"])),
        author_id=UserId(_uuid(row["user_id"])),
        title=row["title"],
        content=row.get("content"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict."""
    post_dict = post.model_dump()
    post_dict["user_id"] = post_dict.pop("author_id")
    return post_dict


def row_to_source_record(row: Dict[str, Any]) -> SourceRecord:
    """Convert a comment or post row to the facts the reconciler needs."""
    return SourceRecord(
        id=_uuid(row["id"]),
        user_id=UserId(_uuid(row["user_id"])),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def row_to_user_comment(row: Dict[str, Any]) -> Projection:
    """Convert a ``user_comments`` row to Projection domain model."""
    return Projection(
        id=ProjectionId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        source_type=SourceType(row["comment_type"]),
        source_id=_uuid(row["comment_id"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def user_comment_to_dict(projection: Projection) -> Dict[str, Any]:
    """Convert Projection domain model to a ``user_comments`` dict."""
    return {
        "id": projection.id,
        "user_id": projection.user_id,
        "comment_type": projection.source_type.value,
        "comment_id": projection.source_id,
        "created_at": projection.created_at,
        "updated_at": projection.updated_at,
        "deleted_at": projection.deleted_at,
    }


def row_to_user_post(row: Dict[str, Any]) -> Projection:
    """Convert a ``user_posts`` row to Projection domain model."""
    return Projection(
        id=ProjectionId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        source_type=SourceType.POST,
        source_id=_uuid(row["post_id"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def user_post_to_dict(projection: Projection) -> Dict[str, Any]:
    """Convert Projection domain model to a ``user_posts`` dict."""
    return {
        "id": projection.id,
        "user_id": projection.user_id,
        "post_id": projection.source_id,
        "created_at": projection.created_at,
        "updated_at": projection.updated_at,
        "deleted_at": projection.deleted_at,
    }
