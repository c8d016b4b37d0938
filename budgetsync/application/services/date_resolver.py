from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import pandas as pd

from budgetsync.domain.models.transaction import DATE_FIELD_ALIASES, TransactionRecord


def parse_date_value(value: Any) -> date | None:
    """Parse one raw field value into a calendar date, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return None if pd.isna(value) else value.date()
    if isinstance(value, date):
        return value
    try:
        if isinstance(value, (int, float)):
            if not math.isfinite(value):
                return None
            # Numeric values are epoch milliseconds.
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        elif isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            ts = pd.to_datetime(text, errors="coerce")
        else:
            return None
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def resolve_transaction_date(
    record: TransactionRecord | Mapping[str, Any],
    fields: tuple[str, ...] = DATE_FIELD_ALIASES,
) -> date | None:
    txn = TransactionRecord.from_mapping(record)
    for _name, value in txn.date_candidates(fields):
        d = parse_date_value(value)
        if d is not None:
            return d
    return None
