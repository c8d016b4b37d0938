from __future__ import annotations

import json

from budgetsync.domain.errors import ValidationError
from budgetsync.domain.models.month import MonthlyIndex, index_from_dict, index_to_dict
from budgetsync.domain.ports.key_value_store import KeyValueStorePort


class KeyValueIndexRepository:
    """Stores the whole monthly index as one JSON document under a single key."""

    def __init__(self, store: KeyValueStorePort, key: str) -> None:
        self.store = store
        self.key = key

    def load(self) -> MonthlyIndex:
        raw = self.store.get(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ValidationError("stored monthly index is not valid JSON") from exc
        if not isinstance(data, dict):
            raise ValidationError("stored monthly index must be an object")
        return index_from_dict(data)

    def save(self, index: MonthlyIndex) -> None:
        self.store.set(self.key, json.dumps(index_to_dict(index), ensure_ascii=False, default=str))
