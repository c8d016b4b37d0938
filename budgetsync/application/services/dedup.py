from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from budgetsync.application.services.date_resolver import resolve_transaction_date
from budgetsync.domain.models.month import MonthBucket
from budgetsync.domain.models.transaction import TransactionRecord

_AMOUNT_TOLERANCE = Decimal("0.01")


def _amount(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation:
        return Decimal("0")


def is_duplicate(a: TransactionRecord, b: TransactionRecord) -> bool:
    """Same resolved date, same trimmed description, amounts within a cent."""
    if resolve_transaction_date(a) != resolve_transaction_date(b):
        return False
    if (a.description or "").strip() != (b.description or "").strip():
        return False
    return abs(_amount(a.amount) - _amount(b.amount)) < _AMOUNT_TOLERANCE


def find_duplicates(bucket: MonthBucket) -> list[tuple[int, int]]:
    """
    Return `(first, later)` position pairs for transactions that repeat an
    earlier one in the same bucket. Merging never drops these; callers decide.
    """
    pairs: list[tuple[int, int]] = []
    seen: list[int] = []
    txns = bucket.transactions
    for i, txn in enumerate(txns):
        for j in seen:
            if is_duplicate(txns[j], txn):
                pairs.append((j, i))
                break
        else:
            seen.append(i)
    return pairs


def without_duplicates(bucket: MonthBucket) -> MonthBucket:
    drop = {later for _, later in find_duplicates(bucket)}
    out = bucket.copy()
    out.transactions = [t for i, t in enumerate(bucket.transactions) if i not in drop]
    return out
