from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from budgetsync.api.dependencies import ApiContext, get_ctx
from budgetsync.api.schemas.common import ok
from budgetsync.logger import current_request_id

router = APIRouter(tags=["months"])


@router.get("/months")
async def list_months(ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    ctx.ledger.session.poll()
    payload = {
        "months": ctx.ledger.available_months(),
        "options": ctx.ledger.month_options(),
    }
    return ok(payload, request_id=current_request_id())


@router.get("/months/statistics")
async def month_statistics(ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    ctx.ledger.session.poll()
    rows = [row.to_dict() for row in ctx.ledger.monthly_statistics()]
    return ok({"statistics": rows}, request_id=current_request_id())


@router.get("/months/{month_key}")
async def get_month(month_key: str, ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    ctx.ledger.session.poll()
    bucket = ctx.ledger.get_month(month_key)
    return ok({"month_key": month_key, **bucket.to_dict()}, request_id=current_request_id())


@router.delete("/months/{month_key}")
async def delete_month(month_key: str, ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    removed = ctx.ledger.delete_month(month_key)
    payload = {"ok": True, "month_key": month_key, "removed": len(removed.transactions)}
    return ok(payload, request_id=current_request_id())
