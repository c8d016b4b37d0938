from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from budgetsync.domain.enums import SyncEventType
from budgetsync.domain.errors import MalformedMessageError


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} in sync message")


@dataclass(frozen=True, slots=True)
class SyncMessage:
    type: SyncEventType
    timestamp: int
    origin_token: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        return {
            "type": str(self.type),
            "payload": dict(self.payload),
            "timestamp": int(self.timestamp),
            "originToken": self.origin_token,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_wire(cls, data: Any) -> SyncMessage:
        if not isinstance(data, Mapping):
            raise MalformedMessageError("sync message must be an object")
        try:
            kind = SyncEventType(data["type"])
        except (KeyError, ValueError) as exc:
            raise MalformedMessageError("unknown sync event type", details={"type": data.get("type")}) from exc

        payload = data.get("payload")
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise MalformedMessageError("sync payload must be an object")

        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise MalformedMessageError("sync timestamp must be epoch millis")
        if isinstance(timestamp, float) and not math.isfinite(timestamp):
            raise MalformedMessageError("sync timestamp must be finite")

        origin = data.get("originToken")
        if not isinstance(origin, str) or not origin:
            raise MalformedMessageError("sync message is missing originToken")

        return cls(type=kind, timestamp=int(timestamp), origin_token=origin, payload=dict(payload))

    @classmethod
    def from_raw(cls, raw: str | bytes | Mapping[str, Any]) -> SyncMessage:
        if isinstance(raw, (str, bytes, bytearray)):
            try:
                data = json.loads(raw, parse_constant=_reject_constant)
            except (ValueError, UnicodeDecodeError) as exc:
                raise MalformedMessageError("sync message is not valid JSON") from exc
            return cls.from_wire(data)
        return cls.from_wire(raw)
