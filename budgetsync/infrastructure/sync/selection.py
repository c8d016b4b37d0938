from __future__ import annotations

from budgetsync.domain.ports.key_value_store import KeyValueStorePort
from budgetsync.domain.ports.sync_transport import SyncTransportPort
from budgetsync.infrastructure.sync.bus import BroadcastBus, BusTransport
from budgetsync.infrastructure.sync.storage_transport import StorageTransport
from budgetsync.settings import Settings


def select_transport(
    settings: Settings,
    *,
    bus: BroadcastBus | None,
    store: KeyValueStorePort,
) -> SyncTransportPort:
    """
    Pick the transport once at startup.

    The bus is preferred whenever one exists, unless storage is forced. Asking
    for the bus without one quietly falls back to the shared key.
    """
    if bus is not None and settings.sync_transport in ("auto", "bus"):
        return BusTransport(bus, settings.sync_channel)
    return StorageTransport(store, settings.sync_key)
