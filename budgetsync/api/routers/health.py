from __future__ import annotations

from fastapi import APIRouter, Request

from budgetsync.api.schemas.common import ok
from budgetsync.logger import current_request_id

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(_: Request) -> dict:
    return ok({"ok": True}, request_id=current_request_id())
