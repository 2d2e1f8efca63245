"""SQLAlchemy table definitions for the board.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, nullable=False),
    Column("title", String(300), nullable=False),
    Column("content", Text, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
)

Index("idx_posts_user_id", posts_table.c.user_id)
Index("idx_posts_deleted_at", posts_table.c.deleted_at)


# ============================================================================
# COMMENT TABLES (one per subject type, identical shape)
# ============================================================================
def _comment_table(name: str, subject_column: Column) -> Table:
    table = Table(
        name,
        metadata,
        Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
        subject_column,
        Column(
            "parent_comment_id", UUID, ForeignKey(f"{name}.id"), nullable=True
        ),
        Column("user_id", UUID, nullable=False),
        Column("content", Text, nullable=False),
        Column("has_child", Boolean, nullable=False, server_default="false"),
        Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default="NOW()",
        ),
        Column(
            "updated_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default="NOW()",
        ),
        Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    )
    # Serves the keyset listing: subject, level, then (created_at, id)
    Index(
        f"idx_{name}_listing",
        table.c[subject_column.name],
        table.c.parent_comment_id,
        table.c.created_at,
        table.c.id,
    )
    Index(f"idx_{name}_parent_comment_id", table.c.parent_comment_id)
    Index(f"idx_{name}_user_id", table.c.user_id)
    return table


post_comments_table = _comment_table(
    "post_comments",
    Column("post_id", UUID, ForeignKey("posts.id"), nullable=False),
)

# Site reviews and scam reports are owned by other services; no foreign key
site_review_comments_table = _comment_table(
    "site_review_comments",
    Column("review_id", UUID, nullable=False),
)

scam_report_comments_table = _comment_table(
    "scam_report_comments",
    Column("scam_report_id", UUID, nullable=False),
)

# ============================================================================
# USER_COMMENTS TABLE (projection of every comment store)
# ============================================================================
user_comments_table = Table(
    "user_comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, nullable=False),
    Column("comment_type", String(50), nullable=False),  # SourceType value
    Column("comment_id", UUID, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint(
        "user_id", "comment_type", "comment_id", name="uq_user_comments_source"
    ),
)

Index("idx_user_comments_user_id", user_comments_table.c.user_id)

# ============================================================================
# USER_POSTS TABLE (projection of the post store)
# ============================================================================
user_posts_table = Table(
    "user_posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, nullable=False),
    Column("post_id", UUID, nullable=False),
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=False),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    UniqueConstraint("user_id", "post_id", name="uq_user_posts_source"),
)

Index("idx_user_posts_user_id", user_posts_table.c.user_id)
