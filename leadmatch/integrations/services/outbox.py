from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

import httpx
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...models import Integration, IntegrationType, OutboxEvent, OutboxStatus
from ..webhook import WebhookSink

log = logging.getLogger(__name__)

LEAD_CREATED = "lead.created"
LEAD_STATUS_CHANGED = "lead.status_changed"


async def enqueue_event(session: AsyncSession, event_type: str, payload: dict[str, Any]) -> OutboxEvent:
    """
    Stage an event in the caller's transaction; it only becomes visible to the
    dispatcher if the business change commits.
    """
    row = OutboxEvent(
        event_type=event_type,
        payload_json=json.dumps(payload, default=str),
        status=OutboxStatus.pending,
        attempts=0,
        created_at=datetime.utcnow(),
    )
    session.add(row)
    await session.flush()
    return row


def _sink_from_integration(
    integ: Integration,
    transport: httpx.AsyncBaseTransport | None,
) -> WebhookSink | None:
    if integ.type != IntegrationType.webhook:
        return None
    try:
        cfg = json.loads(integ.config_json or "{}")
    except ValueError:
        log.warning("integration %s has unreadable config_json; skipped", integ.name)
        return None
    if not cfg.get("url"):
        return None
    return WebhookSink(url=cfg["url"], secret=cfg.get("secret"), transport=transport)


async def build_sinks(
    session: AsyncSession,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[WebhookSink]:
    enabled = (
        await session.execute(select(Integration).where(Integration.enabled.is_(True)).order_by(Integration.id))
    ).scalars().all()
    built = (_sink_from_integration(i, transport) for i in enabled)
    return [s for s in built if s is not None]


def compute_backoff_seconds(attempts_after_increment: int) -> float:
    """
    Exponential backoff with jitter.
    attempts_after_increment: 1,2,3,... (after we increment attempts)
    """
    base = settings.OUTBOX_BACKOFF_BASE_SECONDS
    capped = min(base * 2 ** max(0, attempts_after_increment - 1), settings.OUTBOX_BACKOFF_CAP_SECONDS)
    return capped + random.uniform(0.0, min(base, capped))


@dataclass
class _Tally:
    delivered: int = 0
    failed: int = 0


async def _fan_out(ev: OutboxEvent, sinks: list[WebhookSink], pause_s: float) -> str | None:
    """Send one event to every sink; returns the last sink error, or None if all accepted."""
    data = {"event_id": ev.id, **json.loads(ev.payload_json)}
    error: str | None = None
    for sink in sinks:
        res = await sink.deliver(ev.event_type, data)
        if pause_s:
            await asyncio.sleep(pause_s)
        if not res.ok:
            error = res.error
    return error


def _settle(ev: OutboxEvent, error: str | None, max_attempts: int, tally: _Tally) -> None:
    ev.attempts += 1
    ev.last_error = error

    if error is None:
        ev.status = OutboxStatus.delivered
        ev.delivered_at = datetime.utcnow()
        ev.next_attempt_at = None
        tally.delivered += 1
        return

    if ev.attempts >= max_attempts:
        ev.status = OutboxStatus.failed
        ev.next_attempt_at = None
        tally.failed += 1
        log.warning("outbox event %s (%s) failed permanently: %s", ev.id, ev.event_type, error)
        return

    ev.next_attempt_at = datetime.utcnow() + timedelta(seconds=compute_backoff_seconds(ev.attempts))


async def dispatch_pending_events(
    session: AsyncSession,
    batch_size: int | None = None,
    max_attempts: int | None = None,
    rps: float | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """
    Deliver pending outbox events to every enabled sink.

    Quiet by default: with no enabled sinks nothing is read and no HTTP happens.
    An event is delivered only when every sink accepts it; otherwise it is retried
    with backoff until max_attempts, then marked failed.
    """
    batch_size = batch_size or settings.OUTBOX_BATCH_SIZE
    max_attempts = max_attempts or settings.OUTBOX_MAX_ATTEMPTS
    rps = settings.OUTBOX_WEBHOOK_RPS if rps is None else rps

    sinks = await build_sinks(session, transport=transport)
    if not sinks:
        return {"delivered": 0, "failed": 0, "sinks": 0, "events": 0, "skipped_no_sinks": 1}

    due = (
        select(OutboxEvent)
        .where(
            OutboxEvent.status == OutboxStatus.pending,
            OutboxEvent.attempts < max_attempts,
            or_(OutboxEvent.next_attempt_at.is_(None), OutboxEvent.next_attempt_at <= datetime.utcnow()),
        )
        .order_by(OutboxEvent.id)
        .limit(batch_size)
    )
    batch = (await session.execute(due)).scalars().all()

    pause_s = 1.0 / rps if rps > 0 else 0.0
    tally = _Tally()
    for ev in batch:
        _settle(ev, await _fan_out(ev, sinks, pause_s), max_attempts, tally)
        await session.flush()

    log.info(
        "outbox dispatch: delivered=%d failed=%d events=%d sinks=%d",
        tally.delivered, tally.failed, len(batch), len(sinks),
    )
    return {
        "delivered": tally.delivered,
        "failed": tally.failed,
        "sinks": len(sinks),
        "events": len(batch),
        "skipped_no_sinks": 0,
    }
