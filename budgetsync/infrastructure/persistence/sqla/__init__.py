from __future__ import annotations

from .engine import dispose_engine, get_engine
from .repositories import SqlKeyValueStore, ensure_schema
from .session import connection_scope

__all__ = [
    "SqlKeyValueStore",
    "connection_scope",
    "dispose_engine",
    "ensure_schema",
    "get_engine",
]
