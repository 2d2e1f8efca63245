"""Unit tests for AddCommentUseCase."""

from uuid import UUID, uuid4

import pytest

from board.application.usecase.comment import AddCommentRequest, AddCommentUseCase
from board.domain.error import BadReferenceError, NotFoundError, ParentNotFoundError
from board.domain.repository import (
    PostCommentRepository,
    PostRepository,
    ScamReportCommentRepository,
)
from board.domain.service import HasChildUpdater
from board.domain.value import SourceType, SubjectId, UserId
from tests.conftest import make_comment, make_post, minutes
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestAddCommentUseCase:
    """Tests for AddCommentUseCase."""

    @pytest.mark.asyncio
    async def test_reply_marks_parent_as_having_children(self, unit_env):
        """A reply is stored and its parent's flag catches up."""
        # Arrange
        use_case = await unit_env.get(AddCommentUseCase)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(PostCommentRepository)
        updater = await unit_env.get(HasChildUpdater)
        author_id = UserId(uuid4())
        post = make_post(author_id)
        await post_repo.save(post)

        top = await use_case.execute(
            AddCommentRequest(
                source_type=SourceType.POST_COMMENT,
                subject_id=str(post.id),
                author_id=str(author_id),
                content="First!",
            )
        )

        # Act
        reply = await use_case.execute(
            AddCommentRequest(
                source_type=SourceType.POST_COMMENT,
                subject_id=str(post.id),
                author_id=str(author_id),
                content="Replying",
                parent_id=top.comment.comment_id,
            )
        )
        await updater.drain()

        # Assert
        assert reply.comment.parent_id == top.comment.comment_id
        assert reply.comment.has_child is False
        parent = await comment_repo.find_by_id(UUID(top.comment.comment_id))
        assert parent.has_child is True

    @pytest.mark.asyncio
    async def test_post_must_exist(self, unit_env):
        """Commenting on an unknown post is a 404-style error."""
        # Arrange
        use_case = await unit_env.get(AddCommentUseCase)

        # Act & Assert
        with pytest.raises(NotFoundError, match="Post not found"):
            await use_case.execute(
                AddCommentRequest(
                    source_type=SourceType.POST_COMMENT,
                    subject_id=str(uuid4()),
                    author_id=str(uuid4()),
                    content="Hello",
                )
            )

    @pytest.mark.asyncio
    async def test_foreign_subjects_are_not_checked(self, unit_env):
        """Scam reports are owned elsewhere; any subject ID is accepted."""
        # Arrange
        use_case = await unit_env.get(AddCommentUseCase)
        comment_repo = await unit_env.get(ScamReportCommentRepository)
        subject_id = str(uuid4())

        # Act
        response = await use_case.execute(
            AddCommentRequest(
                source_type=SourceType.SCAM_REPORT_COMMENT,
                subject_id=subject_id,
                author_id=str(uuid4()),
                content="Seen this too",
            )
        )

        # Assert
        assert response.comment.subject_id == subject_id
        assert await comment_repo.find_by_id(UUID(response.comment.comment_id)) is not None

    @pytest.mark.asyncio
    async def test_deleted_parent_is_rejected(self, unit_env):
        """Replying to a deleted comment fails as not found."""
        # Arrange
        use_case = await unit_env.get(AddCommentUseCase)
        comment_repo = await unit_env.get(ScamReportCommentRepository)
        subject_id = SubjectId(uuid4())
        parent = make_comment(subject_id, deleted_at=minutes(1))
        await comment_repo.save(parent)

        # Act & Assert
        with pytest.raises(ParentNotFoundError):
            await use_case.execute(
                AddCommentRequest(
                    source_type=SourceType.SCAM_REPORT_COMMENT,
                    subject_id=str(subject_id),
                    author_id=str(uuid4()),
                    content="Too late",
                    parent_id=str(parent.id),
                )
            )

    @pytest.mark.asyncio
    async def test_parent_on_other_subject_is_rejected(self, unit_env):
        """A reply must stay on its parent's subject."""
        # Arrange
        use_case = await unit_env.get(AddCommentUseCase)
        comment_repo = await unit_env.get(ScamReportCommentRepository)
        parent = make_comment(SubjectId(uuid4()))
        await comment_repo.save(parent)

        # Act & Assert
        with pytest.raises(BadReferenceError) as exc_info:
            await use_case.execute(
                AddCommentRequest(
                    source_type=SourceType.SCAM_REPORT_COMMENT,
                    subject_id=str(uuid4()),
                    author_id=str(uuid4()),
                    content="Wrong thread",
                    parent_id=str(parent.id),
                )
            )
        assert not isinstance(exc_info.value, ParentNotFoundError)

    def test_empty_content_is_invalid(self):
        """Content must not be empty."""
        with pytest.raises(ValueError):
            AddCommentRequest(
                source_type=SourceType.POST_COMMENT,
                subject_id=str(uuid4()),
                author_id=str(uuid4()),
                content="",
            )
