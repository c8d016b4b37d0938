from __future__ import annotations

from typing import Any

from pydantic import Field

from budgetsync.api.schemas.common import RequestModel
from budgetsync.domain.enums import SyncEventType


class BroadcastPayload(RequestModel):
    type: SyncEventType
    payload: dict[str, Any] = Field(default_factory=dict)
