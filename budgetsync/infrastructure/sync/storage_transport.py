from __future__ import annotations

from budgetsync.domain.enums import TransportKind
from budgetsync.domain.models.sync import SyncMessage
from budgetsync.domain.ports.key_value_store import KeyValueStorePort
from budgetsync.domain.ports.sync_transport import RawHandler


class StorageTransport:
    """
    Broadcast through a single shared key.

    Every send overwrites the key with the serialized message. Readers call
    `poll()`; the handler fires only when the stored value differs from the
    last value this transport saw, including its own writes. A change is
    consumed whether or not the handler dispatches it.
    """

    kind = TransportKind.STORAGE

    def __init__(self, store: KeyValueStorePort, key: str) -> None:
        self.store = store
        self.key = key
        self._handler: RawHandler | None = None
        self._last_seen: str | None = store.get(key)
        self._closed = False

    def send(self, message: SyncMessage) -> None:
        value = message.to_json()
        self.store.set(self.key, value)
        self._last_seen = value

    def subscribe(self, handler: RawHandler) -> None:
        self._handler = handler

    def poll(self) -> int:
        """Deliver a pending change; returns 1 if the handler dispatched it, else 0."""
        if self._closed:
            return 0
        value = self.store.get(self.key)
        if value is None or value == self._last_seen:
            return 0
        self._last_seen = value
        if self._handler is None:
            return 0
        return 1 if self._handler(value) else 0

    def close(self) -> None:
        self._closed = True
        self._handler = None
