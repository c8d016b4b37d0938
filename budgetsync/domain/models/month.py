from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any, TypeAlias

from budgetsync.domain.errors import ValidationError
from budgetsync.domain.models.transaction import TransactionRecord

_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    return f"{_MONTH_NAMES[d.month - 1]} {d.year}"


@dataclass(slots=True)
class MonthBucket:
    start_date: date
    end_date: date
    display_label: str
    transactions: list[TransactionRecord] = field(default_factory=list)

    @classmethod
    def open(cls, d: date) -> MonthBucket:
        return cls(start_date=d, end_date=d, display_label=month_label(d))

    def add(self, record: TransactionRecord, d: date) -> None:
        self.transactions.append(record)
        if d < self.start_date:
            self.start_date = d
        if d > self.end_date:
            self.end_date = d

    def copy(self) -> MonthBucket:
        return MonthBucket(
            start_date=self.start_date,
            end_date=self.end_date,
            display_label=self.display_label,
            transactions=list(self.transactions),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "displayLabel": self.display_label,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MonthBucket:
        try:
            start = date.fromisoformat(str(data["startDate"])[:10])
            end = date.fromisoformat(str(data["endDate"])[:10])
            label = str(data["displayLabel"])
            rows = [TransactionRecord.from_mapping(r) for r in data.get("transactions") or []]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValidationError("invalid month bucket", details={"bucket": repr(data)}) from exc
        return cls(start_date=start, end_date=end, display_label=label, transactions=rows)


MonthlyIndex: TypeAlias = dict[str, MonthBucket]


def index_to_dict(index: Mapping[str, MonthBucket]) -> dict[str, Any]:
    return {key: bucket.to_dict() for key, bucket in index.items()}


def index_from_dict(data: Mapping[str, Any]) -> MonthlyIndex:
    return {str(key): MonthBucket.from_dict(value) for key, value in data.items()}


@dataclass(frozen=True, slots=True)
class MonthStatistics:
    month_key: str
    display_label: str
    transaction_count: int
    start: date
    end: date

    def to_dict(self) -> dict[str, Any]:
        return {
            "monthKey": self.month_key,
            "displayLabel": self.display_label,
            "transactionCount": self.transaction_count,
            "dateRange": {"start": self.start.isoformat(), "end": self.end.isoformat()},
        }


@dataclass(slots=True)
class AggregationReport:
    index: MonthlyIndex
    accepted: int = 0
    skipped: int = 0

    @property
    def months(self) -> list[str]:
        return sorted(self.index, reverse=True)
