from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from budgetsync.application.services.sync_dispatcher import SyncDispatcher
from budgetsync.domain.enums import SyncEventType, SyncState
from budgetsync.domain.models.sync import SyncMessage
from budgetsync.domain.ports.sync_transport import SyncTransportPort
from budgetsync.logger import get_logger


def now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class SyncSession:
    """
    Lifecycle of one context's sync link: uninitialized -> active -> closed.

    Broadcasting is best-effort: nothing here raises into the caller, and
    once closed the session neither sends nor dispatches.
    """

    def __init__(
        self,
        dispatcher: SyncDispatcher,
        transport_factory: Callable[[], SyncTransportPort],
        *,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.dispatcher = dispatcher
        self._transport_factory = transport_factory
        self._clock = clock
        self.transport: SyncTransportPort | None = None
        self.state = SyncState.UNINITIALIZED
        self._logger = get_logger().bind(context_id=dispatcher.origin_token)

    @property
    def origin_token(self) -> str:
        return self.dispatcher.origin_token

    def start(self) -> None:
        if self.state is not SyncState.UNINITIALIZED:
            return
        transport = self._transport_factory()
        transport.subscribe(self.receive)
        self.transport = transport
        self.state = SyncState.ACTIVE
        self._logger.info(f"sync active via {transport.kind} transport")

    def receive(self, raw: Any) -> bool:
        if self.state is not SyncState.ACTIVE:
            return False
        return self.dispatcher.on_message(raw)

    def broadcast(self, event_type: SyncEventType | str, payload: dict[str, Any] | None = None) -> None:
        if self.state is not SyncState.ACTIVE or self.transport is None:
            return
        try:
            message = SyncMessage(
                type=SyncEventType(event_type),
                timestamp=self._clock(),
                origin_token=self.origin_token,
                payload=dict(payload or {}),
            )
            self.transport.send(message)
        except Exception:
            self._logger.opt(exception=True).warning(f"broadcast of {event_type} failed")

    def poll(self) -> int:
        """Check a storage-backed transport for a new message; bus transports push instead."""
        if self.state is not SyncState.ACTIVE or self.transport is None:
            return 0
        poll = getattr(self.transport, "poll", None)
        if poll is None:
            return 0
        try:
            return int(poll())
        except Exception:
            self._logger.opt(exception=True).warning("sync poll failed")
            return 0

    def close(self) -> None:
        if self.state is SyncState.CLOSED:
            return
        transport = self.transport
        self.state = SyncState.CLOSED
        if transport is not None:
            try:
                transport.close()
            except Exception:
                self._logger.opt(exception=True).warning("closing sync transport failed")
        self._logger.info("sync closed")
