from __future__ import annotations

import json
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from ..integrations.services.outbox import dispatch_pending_events
from ..models import JobRun, JobRunStatus


@asynccontextmanager
async def tracked_job(session: AsyncSession, job_name: str) -> AsyncIterator[JobRun]:
    """
    Record a JobRun around the block. On error the run is marked failed (and
    flushed) before the exception propagates; committing is the caller's call.
    """
    jr = JobRun(job_name=job_name, started_at=datetime.utcnow(), status=JobRunStatus.running)
    session.add(jr)
    await session.flush()
    try:
        yield jr
    except Exception as e:
        jr.status = JobRunStatus.failed
        jr.finished_at = datetime.utcnow()
        jr.error = f"{type(e).__name__}: {e}"
        await session.flush()
        raise
    jr.status = JobRunStatus.success
    jr.finished_at = datetime.utcnow()
    await session.flush()


async def run_dispatch(
    session: AsyncSession,
    batch_size: int = 50,
    *,
    job_name: str = "dispatch",
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    async with tracked_job(session, job_name) as jr:
        result = await dispatch_pending_events(session=session, batch_size=batch_size, transport=transport)
        jr.summary_json = json.dumps(result)
    return result
