# tests/test_outbox_dispatch.py
import json
from datetime import datetime

import httpx
import pytest
from sqlalchemy import select

from leadmatch.integrations.services.outbox import (
    LEAD_CREATED,
    compute_backoff_seconds,
    dispatch_pending_events,
    enqueue_event,
)
from leadmatch.integrations.webhook import SIGNATURE_HEADER, WebhookSink, sign_body
from leadmatch.jobs.dispatch import run_dispatch, tracked_job
from leadmatch.models import Integration, IntegrationType, JobRun, JobRunStatus, OutboxEvent, OutboxStatus


def _integration(name="crm", enabled=True, url="https://crm.test/hook", secret=None) -> Integration:
    return Integration(
        name=name,
        type=IntegrationType.webhook,
        enabled=enabled,
        config_json=json.dumps({"url": url, "secret": secret}),
    )


class Recorder:
    def __init__(self, status_code=200):
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text="ok" if self.status_code < 300 else "nope")


async def test_quiet_without_enabled_sinks(session):
    session.add(_integration(enabled=False))
    ev = await enqueue_event(session, LEAD_CREATED, {"lead_id": 1})
    await session.commit()

    res = await dispatch_pending_events(session)
    assert res == {"delivered": 0, "failed": 0, "sinks": 0, "events": 0, "skipped_no_sinks": 1}
    assert ev.status == OutboxStatus.pending
    assert ev.attempts == 0


async def test_delivers_signed_payload(session):
    session.add(_integration(secret="s3cret"))
    ev = await enqueue_event(session, LEAD_CREATED, {"lead_id": 7, "buyer_name": "Test Buyer"})
    await session.commit()

    rec = Recorder(200)
    res = await dispatch_pending_events(session, transport=httpx.MockTransport(rec))
    await session.commit()

    assert res["delivered"] == 1
    assert res["events"] == 1
    assert ev.status == OutboxStatus.delivered
    assert ev.delivered_at is not None

    (req,) = rec.requests
    assert str(req.url) == "https://crm.test/hook"
    body = json.loads(req.content)
    assert body == {"type": LEAD_CREATED, "data": {"event_id": ev.id, "lead_id": 7, "buyer_name": "Test Buyer"}}
    assert req.headers[SIGNATURE_HEADER] == sign_body("s3cret", req.content)


async def test_failed_delivery_backs_off_then_gives_up(session):
    session.add(_integration())
    ev = await enqueue_event(session, LEAD_CREATED, {"lead_id": 1})
    await session.commit()

    transport = httpx.MockTransport(Recorder(500))
    res = await dispatch_pending_events(session, max_attempts=2, transport=transport)
    assert res["delivered"] == 0
    assert res["failed"] == 0
    assert ev.status == OutboxStatus.pending
    assert ev.attempts == 1
    assert ev.last_error.startswith("HTTP 500")
    assert ev.next_attempt_at > datetime.utcnow()

    # not due yet
    res = await dispatch_pending_events(session, max_attempts=2, transport=transport)
    assert res["events"] == 0

    ev.next_attempt_at = None
    res = await dispatch_pending_events(session, max_attempts=2, transport=transport)
    assert res["failed"] == 1
    assert ev.status == OutboxStatus.failed
    assert ev.attempts == 2


async def test_connection_errors_are_reported_not_raised():
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    sink = WebhookSink("https://down.test/hook", transport=httpx.MockTransport(boom))
    res = await sink.deliver(LEAD_CREATED, {"lead_id": 1})
    assert res.ok is False
    assert res.status_code is None
    assert "ConnectError" in res.error


def test_backoff_grows_and_is_capped(monkeypatch):
    from leadmatch.config import settings

    monkeypatch.setattr(settings, "OUTBOX_BACKOFF_BASE_SECONDS", 10.0)
    monkeypatch.setattr(settings, "OUTBOX_BACKOFF_CAP_SECONDS", 60.0)

    assert 10.0 <= compute_backoff_seconds(1) <= 20.0
    assert 20.0 <= compute_backoff_seconds(2) <= 30.0
    assert 60.0 <= compute_backoff_seconds(10) <= 70.0


async def test_run_dispatch_records_job_run(session):
    session.add(_integration())
    await enqueue_event(session, LEAD_CREATED, {"lead_id": 1})
    await session.commit()

    res = await run_dispatch(session, transport=httpx.MockTransport(Recorder(204)))
    await session.commit()

    jr = (await session.execute(select(JobRun))).scalars().one()
    assert jr.status == JobRunStatus.success
    assert jr.finished_at is not None
    assert json.loads(jr.summary_json) == res
    assert res["delivered"] == 1


async def test_tracked_job_marks_failures(session):
    with pytest.raises(RuntimeError):
        async with tracked_job(session, "explode"):
            raise RuntimeError("kaboom")

    jr = (await session.execute(select(JobRun))).scalars().one()
    assert jr.status == JobRunStatus.failed
    assert jr.error == "RuntimeError: kaboom"


async def test_pending_event_survives_for_later_sinks(session):
    await enqueue_event(session, LEAD_CREATED, {"lead_id": 1})
    await session.commit()
    await dispatch_pending_events(session)

    session.add(_integration())
    await session.commit()
    res = await dispatch_pending_events(session, transport=httpx.MockTransport(Recorder(200)))
    assert res["delivered"] == 1
    assert (await session.execute(select(OutboxEvent))).scalars().one().status == OutboxStatus.delivered


async def test_scheduled_dispatch_is_quiet_without_sinks(session, async_session_maker, monkeypatch):
    from leadmatch.jobs import scheduler

    monkeypatch.setattr(scheduler, "async_session", async_session_maker)
    await enqueue_event(session, LEAD_CREATED, {"lead_id": 1})
    await session.commit()

    assert await scheduler.run_dispatch_quiet() is None


def test_scheduler_registers_dispatch_job():
    from leadmatch.jobs.scheduler import build_scheduler

    job = build_scheduler().get_job("outbox_dispatch")
    assert job is not None
    assert job.max_instances == 1
