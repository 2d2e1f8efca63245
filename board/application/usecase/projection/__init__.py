"""Projection use cases."""

from .sync_user import (
    ProjectionTarget,
    SyncStats,
    SyncUserRequest,
    SyncUserResponse,
    SyncUserUseCase,
)

__all__ = [
    "ProjectionTarget",
    "SyncStats",
    "SyncUserRequest",
    "SyncUserResponse",
    "SyncUserUseCase",
]
