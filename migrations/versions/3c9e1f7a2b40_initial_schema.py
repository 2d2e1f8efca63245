"""initial_schema

Create the board schema:
- Posts
- Comment trees, one table per subject type (posts, site reviews, scam reports)
- Per-user projections (user_comments, user_posts)

Revision ID: 3c9e1f7a2b40
Revises:
Create Date: 2026-10-18 10:12:44.318205

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c9e1f7a2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Comment table name -> subject column
COMMENT_TABLES = {
    "post_comments": "post_id",
    "site_review_comments": "review_id",
    "scam_report_comments": "scam_report_id",
}


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def _id() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        server_default=sa.text("uuid_generate_v4()"),
        nullable=False,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # POSTS table
    # ========================================================================
    op.create_table(
        "posts",
        _id(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_posts_user_id", "posts", ["user_id"])
    op.create_index("idx_posts_deleted_at", "posts", ["deleted_at"])

    # ========================================================================
    # COMMENT tables (identical shape, different subject column)
    # ========================================================================
    for table, subject_column in COMMENT_TABLES.items():
        subject_fk = (
            [sa.ForeignKeyConstraint([subject_column], ["posts.id"])]
            if subject_column == "post_id"
            else []
        )
        op.create_table(
            table,
            _id(),
            sa.Column(subject_column, sa.UUID(), nullable=False),
            sa.Column("parent_comment_id", sa.UUID(), nullable=True),
            sa.Column("user_id", sa.UUID(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            sa.Column("has_child", sa.Boolean(), nullable=False, server_default="false"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["parent_comment_id"], [f"{table}.id"]),
            *subject_fk,
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            f"idx_{table}_listing",
            table,
            [subject_column, "parent_comment_id", "created_at", "id"],
        )
        op.create_index(f"idx_{table}_parent_comment_id", table, ["parent_comment_id"])
        op.create_index(f"idx_{table}_user_id", table, ["user_id"])

    # ========================================================================
    # USER_COMMENTS table
    # ========================================================================
    op.create_table(
        "user_comments",
        _id(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("comment_type", sa.String(50), nullable=False),
        sa.Column("comment_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "comment_type", "comment_id", name="uq_user_comments_source"
        ),
    )
    op.create_index("idx_user_comments_user_id", "user_comments", ["user_id"])

    # ========================================================================
    # USER_POSTS table
    # ========================================================================
    op.create_table(
        "user_posts",
        _id(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_user_posts_source"),
    )
    op.create_index("idx_user_posts_user_id", "user_posts", ["user_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("user_posts")
    op.drop_table("user_comments")
    for table in reversed(list(COMMENT_TABLES)):
        op.drop_table(table)
    op.drop_table("posts")
