from __future__ import annotations

from typing import Any

from pydantic import Field

from budgetsync.api.schemas.common import RequestModel


class ImportRecordsPayload(RequestModel):
    records: list[dict[str, Any]] = Field(default_factory=list)
