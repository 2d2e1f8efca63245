"""Integration tests for PostgresCommentRepository.

Run against a migrated database:

    DATABASE__URL=postgresql+asyncpg://... alembic upgrade head
    DATABASE__URL=postgresql+asyncpg://... pytest tests/integration
"""

import os
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from board.domain.repository import SiteReviewCommentRepository
from board.domain.value import SortDirection, SubjectId
from tests.conftest import make_comment, minutes
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    "DATABASE__URL" not in os.environ, reason="needs a PostgreSQL database"
)

# Integration test fixture - real PostgreSQL
integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture(autouse=True)
async def clean_database(integration_env):
    """Empty the comment table before each test."""
    session = await integration_env.get(AsyncSession)
    await session.execute(text("TRUNCATE TABLE site_review_comments"))
    await session.commit()


async def seed_tree(repo):
    """root -> reply -> nested, plus a sibling root."""
    subject_id = SubjectId(uuid4())
    root = make_comment(subject_id, created_at=minutes(1))
    reply = make_comment(subject_id, parent_id=root.id, created_at=minutes(2))
    nested = make_comment(subject_id, parent_id=reply.id, created_at=minutes(3))
    sibling = make_comment(subject_id, created_at=minutes(4))
    for c in (root, reply, nested, sibling):
        await repo.save(c)
    return subject_id, root, reply, nested, sibling


class TestCommentRepositoryIntegration:
    """Integration tests for the SQL comment queries."""

    @pytest.mark.asyncio
    async def test_soft_delete_tree_reaches_every_level(self, integration_env):
        """The recursive delete marks the whole subtree and nothing else."""
        # Arrange
        repo = await integration_env.get(SiteReviewCommentRepository)
        _, root, reply, nested, sibling = await seed_tree(repo)

        # Act
        deleted = await repo.soft_delete_tree(root.id, minutes(10))

        # Assert
        assert set(deleted) == {root.id, reply.id, nested.id}
        assert await repo.find_by_id(nested.id) is None
        gone = await repo.find_by_id(nested.id, include_deleted=True)
        assert gone.deleted_at == minutes(10)
        assert await repo.find_by_id(sibling.id) is not None

    @pytest.mark.asyncio
    async def test_soft_delete_tree_skips_already_deleted(self, integration_env):
        """Rows deleted earlier keep their original timestamp."""
        # Arrange
        repo = await integration_env.get(SiteReviewCommentRepository)
        _, root, reply, nested, _ = await seed_tree(repo)
        await repo.soft_delete_tree(nested.id, minutes(5))

        # Act
        deleted = await repo.soft_delete_tree(root.id, minutes(10))

        # Assert
        assert set(deleted) == {root.id, reply.id}
        kept = await repo.find_by_id(nested.id, include_deleted=True)
        assert kept.deleted_at == minutes(5)

    @pytest.mark.asyncio
    async def test_keyset_pages(self, integration_env):
        """Pages follow (created_at, id) descending without gaps."""
        # Arrange
        repo = await integration_env.get(SiteReviewCommentRepository)
        subject_id = SubjectId(uuid4())
        comments = [make_comment(subject_id, created_at=minutes(i)) for i in range(5)]
        for c in comments:
            await repo.save(c)

        # Act
        first = await repo.find_page(subject_id=subject_id, limit=2)
        second = await repo.find_page(
            subject_id=subject_id, cursor=first.next_cursor, limit=2
        )
        third = await repo.find_page(
            subject_id=subject_id, cursor=second.next_cursor, limit=2
        )

        # Assert
        ids = [c.id for p in (first, second, third) for c in p.data]
        assert ids == [c.id for c in reversed(comments)]
        assert [p.has_more for p in (first, second, third)] == [True, True, False]

    @pytest.mark.asyncio
    async def test_replies_hidden_under_deleted_parent(self, integration_env):
        # Arrange
        repo = await integration_env.get(SiteReviewCommentRepository)
        subject_id, root, _, _, _ = await seed_tree(repo)
        await repo.save(root.model_copy(update={"deleted_at": minutes(9)}))

        # Act
        page = await repo.find_page(
            subject_id=subject_id, parent_id=root.id, direction=SortDirection.ASC
        )

        # Assert
        assert page.data == []

    @pytest.mark.asyncio
    async def test_reparent_children_to_root(self, integration_env):
        # Arrange
        repo = await integration_env.get(SiteReviewCommentRepository)
        subject_id, root, reply, nested, sibling = await seed_tree(repo)

        # Act
        count = await repo.reparent_children_to_root(root.id)

        # Assert
        assert count == 1
        top = await repo.find_page(subject_id=subject_id, limit=10)
        assert {c.id for c in top.data} == {root.id, reply.id, sibling.id}
        assert (await repo.find_by_id(nested.id)).parent_id == reply.id
        assert await repo.has_live_children(root.id) is False
