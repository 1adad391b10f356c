"""Repository - capability protocols and base classes."""

from row_orm.repository.base import AsyncRepository, Repository
from row_orm.repository.protocol import (
    AsyncForeignKeyRepository,
    BatchForeignKeyRepository,
    ForeignKeyRepository,
)

__all__ = [
    "AsyncForeignKeyRepository",
    "AsyncRepository",
    "BatchForeignKeyRepository",
    "ForeignKeyRepository",
    "Repository",
]
