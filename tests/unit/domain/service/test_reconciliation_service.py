"""Unit tests for ReconciliationService."""

from uuid import uuid4

import pytest

from board.domain.error import StorageUnavailableError
from board.domain.model import Projection
from board.domain.repository import (
    PostCommentRepository,
    PostRepository,
    ScamReportCommentRepository,
    SiteReviewCommentRepository,
    UserCommentRepository,
    UserPostRepository,
)
from board.domain.service import ReconciliationService
from board.domain.value import ProjectionId, SourceType, SubjectId, UserId
from board.persistence.repository.inmemory import (
    InMemoryPostCommentRepository,
    InMemoryPostRepository,
    InMemoryScamReportCommentRepository,
    InMemorySiteReviewCommentRepository,
    InMemoryUserCommentRepository,
    InMemoryUserPostRepository,
)
from tests.conftest import make_comment, make_post, minutes
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class FlakyUserCommentRepository(InMemoryUserCommentRepository):
    """Fails to create projections for chosen source rows."""

    def __init__(self, failing_ids, error: Exception) -> None:
        super().__init__()
        self.failing_ids = set(failing_ids)
        self.error = error

    async def create(self, projection: Projection) -> Projection:
        await super().create(projection)
        if projection.source_id in self.failing_ids:
            raise self.error
        return projection


class BrokenSource(InMemorySiteReviewCommentRepository):
    """Comment store that cannot be read."""

    async def list_for_user_including_deleted(self, user_id):
        raise RuntimeError("replica lag timeout")


def build_service(
    post_comments=None,
    site_review_comments=None,
    user_comments=None,
) -> ReconciliationService:
    return ReconciliationService(
        comment_repositories={
            SourceType.POST_COMMENT: post_comments or InMemoryPostCommentRepository(),
            SourceType.SITE_REVIEW_COMMENT: site_review_comments
            or InMemorySiteReviewCommentRepository(),
            SourceType.SCAM_REPORT_COMMENT: InMemoryScamReportCommentRepository(),
        },
        post_repository=InMemoryPostRepository(),
        user_comment_repository=user_comments or InMemoryUserCommentRepository(),
        user_post_repository=InMemoryUserPostRepository(),
    )


class TestSyncUserComments:
    """Tests for sync_user_comments method."""

    @pytest.mark.asyncio
    async def test_fresh_run_creates_and_mirrors_deletion(self, unit_env):
        """Three comments, one deleted, no projections yet: 3 created, 1 soft deleted."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        subject_id = SubjectId(uuid4())

        live_one = make_comment(subject_id, user_id, created_at=minutes(1))
        live_two = make_comment(subject_id, user_id, created_at=minutes(2))
        dead = make_comment(
            subject_id, user_id, created_at=minutes(3), deleted_at=minutes(4)
        )
        for c in (live_one, live_two, dead):
            await comment_repo.save(c)

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.created == 3
        assert stats.soft_deleted == 1
        assert stats.updated == 0
        assert stats.failed == 0
        assert stats.found[SourceType.POST_COMMENT] == 3

        rows = {r.source_id: r for r in await user_comments.find_all_for_user(user_id)}
        assert set(rows) == {live_one.id, live_two.id, dead.id}
        assert rows[dead.id].deleted_at == minutes(4)
        assert rows[live_one.id].deleted_at is None
        assert rows[live_one.id].created_at == minutes(1)
        assert rows[live_one.id].source_type is SourceType.POST_COMMENT

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(self, unit_env):
        """Running again with no source change is a no-op."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        subject_id = SubjectId(uuid4())
        await comment_repo.save(make_comment(subject_id, user_id, created_at=minutes(1)))
        await comment_repo.save(
            make_comment(subject_id, user_id, created_at=minutes(2), deleted_at=minutes(3))
        )
        await service.sync_user_comments(user_id)
        before = await user_comments.find_all_for_user(user_id)

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert (stats.created, stats.updated, stats.soft_deleted, stats.failed) == (
            0,
            0,
            0,
            0,
        )
        assert stats.changed is False
        assert await user_comments.find_all_for_user(user_id) == before

    @pytest.mark.asyncio
    async def test_gathers_every_comment_store(self, unit_env):
        """Comments from all three stores land in one table, tagged by type."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        stores = {
            SourceType.POST_COMMENT: await unit_env.get(PostCommentRepository),
            SourceType.SITE_REVIEW_COMMENT: await unit_env.get(
                SiteReviewCommentRepository
            ),
            SourceType.SCAM_REPORT_COMMENT: await unit_env.get(
                ScamReportCommentRepository
            ),
        }
        expected = {}
        for source_type, repo in stores.items():
            comment = make_comment(SubjectId(uuid4()), user_id)
            await repo.save(comment)
            expected[comment.id] = source_type

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.created == 3
        assert stats.found == {t: 1 for t in stores}
        rows = await user_comments.find_all_for_user(user_id)
        assert {r.source_id: r.source_type for r in rows} == expected

    @pytest.mark.asyncio
    async def test_other_users_are_ignored(self, unit_env):
        """Only the requested user's rows are touched."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        someone_else = UserId(uuid4())
        await comment_repo.save(make_comment(SubjectId(uuid4()), someone_else))

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.created == 0
        assert await user_comments.find_all_for_user(someone_else) == []

    @pytest.mark.asyncio
    async def test_source_deleted_later_soft_deletes_projection(self, unit_env):
        """A source deleted after the first run is mirrored on the next."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        comment = make_comment(SubjectId(uuid4()), user_id, created_at=minutes(1))
        await comment_repo.save(comment)
        await service.sync_user_comments(user_id)

        await comment_repo.save(comment.model_copy(update={"deleted_at": minutes(9)}))

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.soft_deleted == 1
        assert stats.updated == 0
        row = await user_comments.find_by_key(
            user_id, SourceType.POST_COMMENT, comment.id
        )
        assert row.deleted_at == minutes(9)

    @pytest.mark.asyncio
    async def test_restored_source_restores_projection(self, unit_env):
        """Undeleting the source brings the same projection row back."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        comment = make_comment(
            SubjectId(uuid4()), user_id, created_at=minutes(1), deleted_at=minutes(2)
        )
        await comment_repo.save(comment)
        await service.sync_user_comments(user_id)
        original = await user_comments.find_by_key(
            user_id, SourceType.POST_COMMENT, comment.id
        )

        await comment_repo.save(comment.model_copy(update={"deleted_at": None}))

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.updated == 1
        assert stats.created == 0
        restored = await user_comments.find_by_key(
            user_id, SourceType.POST_COMMENT, comment.id
        )
        assert restored.id == original.id
        assert restored.deleted_at is None

    @pytest.mark.asyncio
    async def test_timestamp_change_counts_as_update(self, unit_env):
        """An edited source refreshes the mirrored timestamps."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        comment = make_comment(SubjectId(uuid4()), user_id, created_at=minutes(1))
        await comment_repo.save(comment)
        await service.sync_user_comments(user_id)

        await comment_repo.save(comment.model_copy(update={"updated_at": minutes(5)}))

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.updated == 1
        row = await user_comments.find_by_key(
            user_id, SourceType.POST_COMMENT, comment.id
        )
        assert row.updated_at == minutes(5)

    @pytest.mark.asyncio
    async def test_orphaned_projection_is_soft_deleted_once(self, unit_env):
        """Rows whose source vanished are pruned, and stay pruned."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        orphan = Projection(
            id=ProjectionId(uuid4()),
            user_id=user_id,
            source_type=SourceType.SCAM_REPORT_COMMENT,
            source_id=uuid4(),
            created_at=minutes(1),
            updated_at=minutes(1),
        )
        await user_comments.create(orphan)
        await user_comments.checkpoint()

        # Act
        first = await service.sync_user_comments(user_id)
        second = await service.sync_user_comments(user_id)

        # Assert
        assert first.soft_deleted == 1
        assert second.soft_deleted == 0
        row = await user_comments.find_by_key(
            user_id, SourceType.SCAM_REPORT_COMMENT, orphan.source_id
        )
        assert row.deleted_at is not None


class TestSyncUserPosts:
    """Tests for sync_user_posts method."""

    @pytest.mark.asyncio
    async def test_posts_are_projected(self, unit_env):
        """Posts feed user_posts exactly like comments feed user_comments."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        post_repo = await unit_env.get(PostRepository)
        user_posts = await unit_env.get(UserPostRepository)
        user_comments = await unit_env.get(UserCommentRepository)
        user_id = UserId(uuid4())
        live = make_post(user_id, created_at=minutes(1))
        dead = make_post(user_id, created_at=minutes(2), deleted_at=minutes(3))
        await post_repo.save(live)
        await post_repo.save(dead)

        # Act
        stats = await service.sync_user_posts(user_id)

        # Assert
        assert stats.created == 2
        assert stats.soft_deleted == 1
        assert stats.found == {SourceType.POST: 2}
        rows = {r.source_id: r for r in await user_posts.find_all_for_user(user_id)}
        assert rows[dead.id].deleted_at == minutes(3)
        assert rows[live.id].source_type is SourceType.POST
        assert await user_comments.find_all_for_user(user_id) == []

    @pytest.mark.asyncio
    async def test_sync_user_runs_both_tables(self, unit_env):
        """sync_user reports each table separately."""
        # Arrange
        service = await unit_env.get(ReconciliationService)
        post_repo = await unit_env.get(PostRepository)
        comment_repo = await unit_env.get(PostCommentRepository)
        user_id = UserId(uuid4())
        post = make_post(user_id)
        await post_repo.save(post)
        await comment_repo.save(make_comment(SubjectId(post.id), user_id))

        # Act
        results = await service.sync_user(user_id)

        # Assert
        assert results["user_comments"].created == 1
        assert results["user_posts"].created == 1


class TestRowIsolation:
    """Failure handling of a reconciliation run."""

    @pytest.mark.asyncio
    async def test_row_failure_is_counted_and_skipped(self):
        """One bad row is rolled back; the others still converge."""
        # Arrange
        user_id = UserId(uuid4())
        subject_id = SubjectId(uuid4())
        post_comments = InMemoryPostCommentRepository()
        good = make_comment(subject_id, user_id, created_at=minutes(1))
        bad = make_comment(subject_id, user_id, created_at=minutes(2))
        await post_comments.save(good)
        await post_comments.save(bad)
        user_comments = FlakyUserCommentRepository({bad.id}, ValueError("bad row"))
        service = build_service(post_comments=post_comments, user_comments=user_comments)

        # Act
        stats = await service.sync_user_comments(user_id)

        # Assert
        assert stats.created == 1
        assert stats.failed == 1
        assert [r.source_id for r in user_comments.rows] == [good.id]

    @pytest.mark.asyncio
    async def test_storage_loss_aborts_run(self):
        """Losing storage is not a row failure: the run stops."""
        # Arrange
        user_id = UserId(uuid4())
        post_comments = InMemoryPostCommentRepository()
        comment = make_comment(SubjectId(uuid4()), user_id)
        await post_comments.save(comment)
        user_comments = FlakyUserCommentRepository(
            {comment.id}, StorageUnavailableError("connection reset")
        )
        service = build_service(post_comments=post_comments, user_comments=user_comments)

        # Act & Assert
        with pytest.raises(StorageUnavailableError):
            await service.sync_user_comments(user_id)

    @pytest.mark.asyncio
    async def test_unreadable_source_aborts_before_pruning(self):
        """A source read failure must not prune rows from the other stores."""
        # Arrange
        user_id = UserId(uuid4())
        user_comments = InMemoryUserCommentRepository()
        existing = Projection(
            id=ProjectionId(uuid4()),
            user_id=user_id,
            source_type=SourceType.SITE_REVIEW_COMMENT,
            source_id=uuid4(),
            created_at=minutes(1),
            updated_at=minutes(1),
        )
        await user_comments.create(existing)
        await user_comments.checkpoint()
        service = build_service(
            site_review_comments=BrokenSource(), user_comments=user_comments
        )

        # Act & Assert
        with pytest.raises(RuntimeError, match="replica lag"):
            await service.sync_user_comments(user_id)
        assert user_comments.rows[0].deleted_at is None

    @pytest.mark.asyncio
    async def test_source_must_belong_to_projection(self):
        """Posts cannot be reconciled into user_comments."""
        # Arrange
        service = build_service()

        # Act & Assert
        with pytest.raises(ValueError, match="does not hold"):
            await service.reconcile(
                UserId(uuid4()), [service.post_repository], service.user_comment_repository
            )
