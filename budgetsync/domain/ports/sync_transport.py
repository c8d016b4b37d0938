from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from budgetsync.domain.enums import TransportKind
from budgetsync.domain.models.sync import SyncMessage

# Receives one raw inbound message; returns True when it was dispatched.
RawHandler = Callable[[Any], bool]


class SyncTransportPort(Protocol):
    kind: TransportKind

    def send(self, message: SyncMessage) -> None: ...

    def subscribe(self, handler: RawHandler) -> None: ...

    def close(self) -> None: ...
