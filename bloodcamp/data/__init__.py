"""PocketBase data access: connections, repositories, batched writes and live queries."""

from __future__ import annotations

from .batch import WriteBatch, WriteOp
from .connection_manager import ConnectionConfig, ConnectionManager
from .live_query import LiveQuery
from .repository_factory import RepositoryFactory

__all__ = [
    "ConnectionConfig",
    "ConnectionManager",
    "LiveQuery",
    "RepositoryFactory",
    "WriteBatch",
    "WriteOp",
]
