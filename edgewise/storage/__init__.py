"""Edge storage — protocol, query building, SQLite repository."""

from __future__ import annotations

from edgewise.storage.base import EdgeRecord, EdgeStorage
from edgewise.storage.db import close_db, open_db
from edgewise.storage.query import ConnectionPredicate, ConnectionQuery, build_connection_predicate
from edgewise.storage.repo import EdgeRepository

__all__ = [
    "ConnectionPredicate",
    "ConnectionQuery",
    "EdgeRecord",
    "EdgeRepository",
    "EdgeStorage",
    "build_connection_predicate",
    "close_db",
    "open_db",
]
