from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from budgetsync.application.services.date_resolver import resolve_transaction_date
from budgetsync.application.services.statistics import build_monthly_statistics
from budgetsync.domain.models.month import (
    AggregationReport,
    MonthBucket,
    MonthlyIndex,
    MonthStatistics,
    month_key,
)
from budgetsync.domain.models.transaction import TransactionRecord
from budgetsync.logger import get_logger


def aggregate_records(records: Iterable[Mapping[str, Any] | TransactionRecord]) -> AggregationReport:
    """
    Group records into month buckets keyed by `YYYY-MM`.

    Records without a resolvable date are left out and only counted; this is
    not treated as an error.
    """
    index: MonthlyIndex = {}
    accepted = 0
    skipped = 0
    for raw in records:
        record = TransactionRecord.from_mapping(raw)
        d = resolve_transaction_date(record)
        if d is None:
            skipped += 1
            continue
        key = month_key(d)
        bucket = index.get(key)
        if bucket is None:
            bucket = MonthBucket.open(d)
            index[key] = bucket
        bucket.add(record, d)
        accepted += 1
    return AggregationReport(index=index, accepted=accepted, skipped=skipped)


def merge_monthly_indexes(indexes: Iterable[Mapping[str, MonthBucket]]) -> MonthlyIndex:
    """Concatenate buckets month by month, in input order. Inputs are left untouched."""
    merged: MonthlyIndex = {}
    for index in indexes:
        for key, bucket in index.items():
            target = merged.get(key)
            if target is None:
                merged[key] = bucket.copy()
                continue
            target.transactions.extend(bucket.transactions)
            if bucket.start_date < target.start_date:
                target.start_date = bucket.start_date
            if bucket.end_date > target.end_date:
                target.end_date = bucket.end_date
    return merged


class MonthlyAggregator:
    def __init__(self) -> None:
        self._index: MonthlyIndex = {}
        self.last_report: AggregationReport | None = None
        self._logger = get_logger()

    @property
    def index(self) -> MonthlyIndex:
        return self._index

    def aggregate(self, records: Iterable[Mapping[str, Any] | TransactionRecord]) -> MonthlyIndex:
        report = aggregate_records(records)
        self._index = report.index
        self.last_report = report
        if report.skipped:
            self._logger.debug(f"aggregate skipped {report.skipped} record(s) without a usable date")
        self._logger.info(
            f"aggregated {report.accepted} transaction(s) into {len(report.index)} month(s)"
        )
        return self._index

    def replace(self, index: MonthlyIndex) -> None:
        self._index = index

    def available_months(self) -> list[str]:
        return sorted(self._index, reverse=True)

    def get_month(self, key: str) -> MonthBucket | None:
        return self._index.get(key)

    def monthly_statistics(self) -> list[MonthStatistics]:
        return build_monthly_statistics(self._index)
