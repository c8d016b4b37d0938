from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from budgetsync.application.services.aggregation import (
    MonthlyAggregator,
    aggregate_records,
    merge_monthly_indexes,
)
from budgetsync.application.services.statistics import month_options
from budgetsync.application.services.sync_dispatcher import (
    Notifier,
    RefreshCallback,
    SyncDispatcher,
    ViewRegistry,
)
from budgetsync.application.services.sync_session import SyncSession
from budgetsync.domain.enums import SyncEventType
from budgetsync.domain.errors import NotFoundError
from budgetsync.domain.models.month import (
    AggregationReport,
    MonthBucket,
    MonthlyIndex,
    MonthStatistics,
)
from budgetsync.domain.models.transaction import TransactionRecord
from budgetsync.domain.ports.index_repository import MonthlyIndexRepositoryPort
from budgetsync.domain.ports.sync_transport import SyncTransportPort
from budgetsync.logger import get_logger


class LedgerContext:
    """
    One open context (tab, window, process) over the shared ledger.

    The context owns its monthly index. Local edits are persisted and applied
    before they are broadcast; inbound signals replace the index wholesale
    from the repository.
    """

    def __init__(
        self,
        context_id: str,
        repository: MonthlyIndexRepositoryPort,
        transport_factory: Callable[[], SyncTransportPort],
        *,
        notifier: Notifier | None = None,
    ) -> None:
        self.context_id = context_id
        self.repository = repository
        self.aggregator = MonthlyAggregator()
        self.views = ViewRegistry()
        self.current_view: str | None = None
        self.dispatcher = SyncDispatcher(
            context_id,
            reload=self.reload,
            views=self.views,
            current_view=lambda: self.current_view,
            notifier=notifier,
        )
        self.session = SyncSession(self.dispatcher, transport_factory)
        self._logger = get_logger().bind(context_id=context_id)

    @property
    def index(self) -> MonthlyIndex:
        return self.aggregator.index

    def start(self) -> None:
        self.reload()
        self.session.start()

    def close(self) -> None:
        self.session.close()

    def register_view(self, view_id: str, callback: RefreshCallback) -> None:
        self.views.register(view_id, callback)

    def show_view(self, view_id: str | None) -> None:
        self.current_view = view_id

    def reload(self) -> None:
        self.aggregator.replace(self.repository.load())
        self._logger.debug(f"reloaded {len(self.index)} month(s) from store")

    def import_records(self, records: Iterable[Mapping[str, Any] | TransactionRecord]) -> AggregationReport:
        report = aggregate_records(records)
        if report.skipped:
            self._logger.debug(f"import skipped {report.skipped} record(s) without a usable date")
        # Merge onto the persisted state; the local copy may lag behind other contexts.
        merged = merge_monthly_indexes([self.repository.load(), report.index])
        self._commit(merged)
        self.session.broadcast(
            SyncEventType.DATA_CHANGED,
            {"months": report.months, "added": report.accepted, "skipped": report.skipped},
        )
        self._logger.info(
            f"imported {report.accepted} transaction(s) into {len(report.index)} month(s)"
        )
        return report

    def replace_index(self, index: MonthlyIndex) -> None:
        index = merge_monthly_indexes([index])
        self._commit(index)
        self.session.broadcast(SyncEventType.DATA_CHANGED, {"months": sorted(index, reverse=True)})

    def delete_month(self, key: str) -> MonthBucket:
        current = self.repository.load()
        if key not in current:
            raise NotFoundError(f"month not found: {key}", details={"month_key": key})
        removed = current.pop(key)
        self._commit(current)
        self.session.broadcast(SyncEventType.DATA_CHANGED, {"months": [key], "deleted": True})
        return removed

    def notify(self, event_type: SyncEventType | str, payload: dict[str, Any] | None = None) -> None:
        """Signal a change made elsewhere (categories, budgets) that is already persisted."""
        self.session.broadcast(event_type, payload)

    def available_months(self) -> list[str]:
        return self.aggregator.available_months()

    def get_month(self, key: str) -> MonthBucket:
        bucket = self.aggregator.get_month(key)
        if bucket is None:
            raise NotFoundError(f"month not found: {key}", details={"month_key": key})
        return bucket

    def monthly_statistics(self) -> list[MonthStatistics]:
        return self.aggregator.monthly_statistics()

    def month_options(self) -> list[dict[str, str]]:
        return month_options(self.index)

    def _commit(self, index: MonthlyIndex) -> None:
        self.repository.save(index)
        self.aggregator.replace(index)
