from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Tried in order; the first one holding a parseable value wins.
DATE_FIELD_ALIASES: tuple[str, ...] = ("Transaction Date", "Date", "date", "transaction_date")


def _first_present(values: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in values and values[key] is not None:
            return values[key]
    return None


@dataclass(slots=True)
class TransactionRecord:
    """
    One externally supplied transaction.

    `values` keeps the record exactly as it arrived (field names included) so
    that persistence round-trips it untouched. Only a few canonical fields are
    read through accessors; everything else stays opaque.
    """

    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | TransactionRecord) -> TransactionRecord:
        if isinstance(data, TransactionRecord):
            return data
        return cls(values=dict(data))

    @property
    def description(self) -> str | None:
        value = _first_present(self.values, "Description", "description")
        return None if value is None else str(value)

    @property
    def amount(self) -> Any:
        return _first_present(self.values, "Amount", "amount")

    @property
    def category(self) -> str | None:
        value = _first_present(self.values, "Category", "category")
        return None if value is None else str(value)

    def date_candidates(self, fields: tuple[str, ...] = DATE_FIELD_ALIASES) -> list[tuple[str, Any]]:
        return [(name, self.values[name]) for name in fields if self.values.get(name)]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.values)
