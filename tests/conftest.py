"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire
import pytest

from board.domain.model import Comment, Post
from board.domain.value import CommentId, PostId, SubjectId, UserId

# Keep telemetry local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_comment(
    subject_id: SubjectId,
    author_id: UserId | None = None,
    parent_id: CommentId | None = None,
    created_at: datetime | None = None,
    deleted_at: datetime | None = None,
    content: str = "Test comment",
) -> Comment:
    """Build a comment with sensible defaults for seeding repositories."""
    created = created_at or datetime.now(timezone.utc)
    return Comment(
        id=CommentId(uuid4()),
        subject_id=subject_id,
        author_id=author_id or UserId(uuid4()),
        content=content,
        parent_id=parent_id,
        has_child=False,
        created_at=created,
        updated_at=created,
        deleted_at=deleted_at,
    )


def make_post(
    author_id: UserId,
    created_at: datetime | None = None,
    deleted_at: datetime | None = None,
) -> Post:
    """Build a post with sensible defaults for seeding repositories."""
    created = created_at or datetime.now(timezone.utc)
    return Post(
        id=PostId(uuid4()),
        author_id=author_id,
        title="Test post",
        content="Test content",
        created_at=created,
        updated_at=created,
        deleted_at=deleted_at,
    )


def minutes(n: int) -> datetime:
    """Fixed timestamp ``n`` minutes after the test epoch."""
    return BASE_TIME + timedelta(minutes=n)


@pytest.fixture
def subject_id() -> SubjectId:
    return SubjectId(uuid4())


@pytest.fixture
def user_id() -> UserId:
    return UserId(uuid4())
