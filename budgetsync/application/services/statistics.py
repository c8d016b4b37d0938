from __future__ import annotations

from collections.abc import Mapping

from budgetsync.domain.models.month import MonthBucket, MonthStatistics


def build_monthly_statistics(index: Mapping[str, MonthBucket]) -> list[MonthStatistics]:
    rows = [
        MonthStatistics(
            month_key=key,
            display_label=bucket.display_label,
            transaction_count=len(bucket.transactions),
            start=bucket.start_date,
            end=bucket.end_date,
        )
        for key, bucket in index.items()
    ]
    rows.sort(key=lambda r: r.month_key, reverse=True)
    return rows


def month_options(index: Mapping[str, MonthBucket]) -> list[dict[str, str]]:
    """Month selector entries, newest first."""
    return [
        {
            "value": row.month_key,
            "label": f"{row.display_label} ({row.transaction_count} transactions)",
        }
        for row in build_monthly_statistics(index)
    ]
