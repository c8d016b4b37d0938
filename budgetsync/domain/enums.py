from __future__ import annotations

from enum import StrEnum


class SyncEventType(StrEnum):
    CATEGORY_ADDED = "category_added"
    CATEGORY_DELETED = "category_deleted"
    CATEGORY_UPDATED = "category_updated"
    DATA_CHANGED = "data_changed"
    BUDGET_UPDATED = "budget_updated"


class SyncState(StrEnum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


class TransportKind(StrEnum):
    BUS = "bus"
    STORAGE = "storage"
