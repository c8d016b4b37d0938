from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from budgetsync.api.dependencies import ApiContext, get_ctx
from budgetsync.api.schemas.common import ok
from budgetsync.api.schemas.sync import BroadcastPayload
from budgetsync.logger import current_request_id

router = APIRouter(tags=["sync"])


@router.get("/sync/status")
async def sync_status(ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    session = ctx.ledger.session
    transport = session.transport
    payload = {
        "state": str(session.state),
        "transport": str(transport.kind) if transport is not None else None,
        "origin_token": session.origin_token,
        "views": ctx.ledger.views.views(),
    }
    return ok(payload, request_id=current_request_id())


@router.post("/sync/events")
async def broadcast_event(
    payload: BroadcastPayload,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    ctx.ledger.notify(payload.type, payload.payload)
    return ok({"ok": True}, request_id=current_request_id())


@router.post("/sync/poll")
async def poll(ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    dispatched = ctx.ledger.session.poll()
    return ok({"dispatched": dispatched}, request_id=current_request_id())
