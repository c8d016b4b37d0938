from __future__ import annotations

from typing import Protocol

from budgetsync.domain.models.month import MonthlyIndex


class MonthlyIndexRepositoryPort(Protocol):
    def load(self) -> MonthlyIndex: ...

    def save(self, index: MonthlyIndex) -> None: ...
