from __future__ import annotations

import secrets

from budgetsync.application.services.ledger_context import LedgerContext
from budgetsync.application.services.sync_dispatcher import Notifier
from budgetsync.domain.ports.key_value_store import KeyValueStorePort
from budgetsync.infrastructure.persistence.index_repository import KeyValueIndexRepository
from budgetsync.infrastructure.sync.bus import BroadcastBus
from budgetsync.infrastructure.sync.selection import select_transport
from budgetsync.settings import Settings


def new_context_id() -> str:
    return f"ctx_{secrets.token_hex(4)}"


class ContextFactory:
    """Opens ledger contexts that share one store and, when available, one bus."""

    def __init__(
        self,
        settings: Settings,
        store: KeyValueStorePort,
        *,
        bus: BroadcastBus | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.bus = bus

    def open(
        self,
        context_id: str | None = None,
        *,
        notifier: Notifier | None = None,
        start: bool = True,
    ) -> LedgerContext:
        ctx = LedgerContext(
            context_id or new_context_id(),
            KeyValueIndexRepository(self.store, self.settings.index_key),
            lambda: select_transport(self.settings, bus=self.bus, store=self.store),
            notifier=notifier,
        )
        if start:
            ctx.start()
        return ctx
