from __future__ import annotations

import copy
from typing import Any

from budgetsync.domain.enums import TransportKind
from budgetsync.domain.models.sync import SyncMessage
from budgetsync.domain.ports.sync_transport import RawHandler
from budgetsync.logger import get_logger


class BusChannel:
    """One context's handle on a named channel of a BroadcastBus."""

    def __init__(self, bus: BroadcastBus, name: str) -> None:
        self.bus = bus
        self.name = name
        self.onmessage: RawHandler | None = None
        self.closed = False

    def post_message(self, data: Any) -> None:
        if self.closed:
            raise RuntimeError(f"channel {self.name!r} is closed")
        self.bus.publish(self, data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.bus.detach(self)


class BroadcastBus:
    """
    Same-process publish/subscribe registry of named channels.

    Posting on a channel delivers a deep copy of the data, synchronously, to
    every other open channel with the same name. The sender never receives its
    own post.
    """

    def __init__(self) -> None:
        self._channels: dict[str, list[BusChannel]] = {}
        self._logger = get_logger()

    def open(self, name: str) -> BusChannel:
        channel = BusChannel(self, name)
        self._channels.setdefault(name, []).append(channel)
        return channel

    def detach(self, channel: BusChannel) -> None:
        peers = self._channels.get(channel.name, [])
        if channel in peers:
            peers.remove(channel)
        if not peers:
            self._channels.pop(channel.name, None)

    def subscriber_count(self, name: str) -> int:
        return len(self._channels.get(name, []))

    def publish(self, sender: BusChannel, data: Any) -> None:
        for peer in list(self._channels.get(sender.name, [])):
            if peer is sender or peer.closed or peer.onmessage is None:
                continue
            try:
                peer.onmessage(copy.deepcopy(data))
            except Exception:
                # One broken subscriber must not keep the others from hearing about it.
                self._logger.opt(exception=True).warning(f"bus subscriber on {sender.name!r} failed")


class BusTransport:
    kind = TransportKind.BUS

    def __init__(self, bus: BroadcastBus, channel_name: str) -> None:
        self.channel = bus.open(channel_name)

    def send(self, message: SyncMessage) -> None:
        self.channel.post_message(message.to_wire())

    def subscribe(self, handler: RawHandler) -> None:
        self.channel.onmessage = handler

    def close(self) -> None:
        self.channel.close()
