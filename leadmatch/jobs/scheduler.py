# leadmatch/jobs/scheduler.py
from __future__ import annotations

import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from sqlalchemy import func, or_, select

from ..config import settings
from ..db import async_session
from ..models import Integration, OutboxEvent, OutboxStatus
from ..integrations.services.outbox import dispatch_pending_events

log = logging.getLogger(__name__)


async def run_dispatch_quiet() -> dict | None:
    """
    Scheduled dispatch. Does nothing (returns None) when no integration is enabled
    or nothing is due.
    """
    async with async_session() as session:
        enabled_sinks = (
            await session.execute(
                select(func.count()).select_from(Integration).where(Integration.enabled.is_(True))
            )
        ).scalar_one()
        if int(enabled_sinks) == 0:
            return None

        due = (
            await session.execute(
                select(func.count())
                .select_from(OutboxEvent)
                .where(OutboxEvent.status == OutboxStatus.pending)
                .where(or_(OutboxEvent.next_attempt_at.is_(None), OutboxEvent.next_attempt_at <= datetime.utcnow()))
            )
        ).scalar_one()
        if int(due) == 0:
            return None

    # deliver outside the count transaction
    async with async_session() as session:
        result = await dispatch_pending_events(session=session)
        await session.commit()
    return result


def build_scheduler() -> AsyncIOScheduler:
    sched = AsyncIOScheduler()
    sched.add_job(
        run_dispatch_quiet,
        "interval",
        minutes=settings.SCHED_DISPATCH_INTERVAL_MINUTES,
        id="outbox_dispatch",
        max_instances=1,
        coalesce=True,
    )
    log.debug("dispatch scheduled every %s min", settings.SCHED_DISPATCH_INTERVAL_MINUTES)
    return sched
