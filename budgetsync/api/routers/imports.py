from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from budgetsync.api.dependencies import ApiContext, get_ctx
from budgetsync.api.schemas.common import ok
from budgetsync.api.schemas.imports import ImportRecordsPayload
from budgetsync.logger import current_request_id

router = APIRouter(tags=["imports"])


@router.post("/imports")
async def import_records(
    payload: ImportRecordsPayload,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    report = ctx.ledger.import_records(payload.records)
    data = {"added": report.accepted, "skipped": report.skipped, "months": report.months}
    return ok(data, request_id=current_request_id())
