# leadmatch/entrypoints/api/routers/jobs.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session, require_api_key
from ....jobs.dispatch import run_dispatch
from ....schemas import DispatchResult

router = APIRouter(tags=["jobs"])


@router.post("/jobs/dispatch", response_model=DispatchResult, dependencies=[Depends(require_api_key)])
async def dispatch_outbox(
    batch_size: int = Query(50, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
) -> DispatchResult:
    try:
        result = await run_dispatch(session=session, batch_size=batch_size, job_name="dispatch_api")
    finally:
        # keep the JobRun row (success or failed) either way
        await session.commit()
    return DispatchResult(**result)
