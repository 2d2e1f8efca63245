"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .has_child_service import HasChildUpdater
from .jwt_service import JWTService
from .reconciliation_service import ReconcileStats, ReconciliationService, RowOutcome

__all__ = [
    "CommentService",
    "HasChildUpdater",
    "JWTService",
    "ReconcileStats",
    "ReconciliationService",
    "RowOutcome",
    "Service",
]
