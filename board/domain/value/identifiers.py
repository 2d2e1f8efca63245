"""Strongly typed identifiers for board domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)

# Comments across all three stores share one identifier type; the store
# they live in is carried separately as a SourceType.
CommentId = NewType("CommentId", UUID)

# Whatever a comment tree hangs off: a post, a site review or a scam report
SubjectId = NewType("SubjectId", UUID)

# Rows of the per-user projection tables (user_comments, user_posts)
ProjectionId = NewType("ProjectionId", UUID)
