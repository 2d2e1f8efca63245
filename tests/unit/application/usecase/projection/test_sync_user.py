"""Unit tests for SyncUserUseCase."""

from uuid import uuid4

import pytest

from board.application.usecase.projection import (
    ProjectionTarget,
    SyncUserRequest,
    SyncUserUseCase,
)
from board.domain.repository import PostCommentRepository, PostRepository
from board.domain.value import SubjectId, UserId
from tests.conftest import make_comment, make_post, minutes
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestSyncUserUseCase:
    """Tests for SyncUserUseCase."""

    @pytest.mark.asyncio
    async def test_reports_each_table(self, unit_env):
        """Both tables are reconciled and reported by name."""
        # Arrange
        use_case = await unit_env.get(SyncUserUseCase)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_id = UserId(uuid4())
        post = make_post(user_id, created_at=minutes(1))
        await post_repo.save(post)
        await comment_repo.save(
            make_comment(SubjectId(post.id), user_id, deleted_at=minutes(2))
        )

        # Act
        response = await use_case.execute(SyncUserRequest(user_id=str(user_id)))

        # Assert
        comments = response.results[ProjectionTarget.USER_COMMENTS]
        posts = response.results[ProjectionTarget.USER_POSTS]
        assert (comments.created, comments.soft_deleted) == (1, 1)
        assert comments.found["post_comment"] == 1
        assert (posts.created, posts.soft_deleted) == (1, 0)
        assert response.failed == 0

    @pytest.mark.asyncio
    async def test_single_target(self, unit_env):
        """Only the named table is touched."""
        # Arrange
        use_case = await unit_env.get(SyncUserUseCase)
        post_repo = await unit_env.get(PostRepository)
        user_id = UserId(uuid4())
        await post_repo.save(make_post(user_id))

        # Act
        response = await use_case.execute(
            SyncUserRequest(
                user_id=str(user_id), targets=[ProjectionTarget.USER_COMMENTS]
            )
        )

        # Assert
        assert list(response.results) == [ProjectionTarget.USER_COMMENTS]
        assert response.results[ProjectionTarget.USER_COMMENTS].created == 0
