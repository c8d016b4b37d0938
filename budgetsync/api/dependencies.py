from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Request

from budgetsync.application.services.ledger_context import LedgerContext
from budgetsync.contexts import ContextFactory
from budgetsync.domain.ports.key_value_store import KeyValueStorePort
from budgetsync.infrastructure.persistence.sqla import SqlKeyValueStore
from budgetsync.logger import get_logger
from budgetsync.settings import Settings, load_settings


@dataclass(slots=True)
class ApiContext:
    settings: Settings
    logger: Any
    ledger: LedgerContext


def build_context(settings: Settings | None = None, *, store: KeyValueStorePort | None = None) -> ApiContext:
    settings = settings or load_settings()
    logger = get_logger()
    # Separate server processes share the SQLite file, so only the storage transport reaches them.
    factory = ContextFactory(settings, store or SqlKeyValueStore.at(settings.db_path))
    ledger = factory.open(notifier=lambda text, level: logger.info(f"[{level}] {text}"))
    return ApiContext(settings=settings, logger=logger, ledger=ledger)


def get_ctx(request: Request) -> ApiContext:
    return request.app.state.ctx
