"""Unit tests for the background prewarm scheduler."""

import asyncio

import httpx
import pytest

from reviewclient.domain.events.api_events import PrewarmCompleted
from reviewclient.domain.interfaces.executor import RequestExecutor
from reviewclient.domain.models.request import FailureKind, RetryableFailure, Success
from reviewclient.infrastructure.http.executor import HttpExecutor
from reviewclient.infrastructure.resilience.prewarm import PrewarmScheduler

pytestmark = pytest.mark.asyncio


async def test_prewarm_calls_health_check_once_after_delay(local_endpoint, make_handler, make_http_client, recording_sleep):
    handler = make_handler(httpx.Response(200, text="ok"))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))
    scheduler = PrewarmScheduler(executor, sleep=recording_sleep)

    healthy = await scheduler.schedule()

    assert healthy is True
    assert recording_sleep.calls == [0.5]
    assert handler.paths() == ["/healthz"]
    assert handler.requests[0].method == "GET"


async def test_prewarm_uses_short_deadline_and_no_retries(recording_sleep):
    deadlines = []

    class TimingOutExecutor(RequestExecutor):
        async def execute(self, spec, deadline_ms):
            deadlines.append((spec.path, deadline_ms))
            return RetryableFailure(FailureKind.TIMEOUT, "timeout")

    scheduler = PrewarmScheduler(TimingOutExecutor(), sleep=recording_sleep)

    healthy = await scheduler.schedule()

    assert healthy is False
    assert deadlines == [("/healthz", 5000)]


async def test_unreachable_backend_is_logged_not_raised(local_endpoint, make_handler, make_http_client, recording_sleep, caplog):
    events = []
    handler = make_handler(httpx.ConnectError("connection refused"))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))
    scheduler = PrewarmScheduler(executor, sleep=recording_sleep, event_listener=events.append)

    with caplog.at_level("WARNING"):
        healthy = await scheduler.schedule()

    assert healthy is False
    assert len(handler.requests) == 1
    assert any("Prewarm failed" in record.getMessage() for record in caplog.records)
    assert len(events) == 1
    assert isinstance(events[0], PrewarmCompleted)
    assert events[0].healthy is False
    assert events[0].reason == "network: connection refused"


async def test_unexpected_error_lands_in_error_sink(recording_sleep, caplog):
    class BrokenExecutor(RequestExecutor):
        async def execute(self, spec, deadline_ms):
            raise RuntimeError("executor bug")

    scheduler = PrewarmScheduler(BrokenExecutor(), sleep=recording_sleep)

    with caplog.at_level("WARNING"):
        task = scheduler.schedule()
        await asyncio.wait({task})
        await asyncio.sleep(0)  # let the done-callback run

    assert isinstance(task.exception(), RuntimeError)
    assert any("Prewarm aborted" in record.getMessage() for record in caplog.records)


async def test_schedule_reuses_pending_prewarm():
    release = asyncio.Event()

    async def gated_sleep(seconds):
        await release.wait()

    class OkExecutor(RequestExecutor):
        calls = 0

        async def execute(self, spec, deadline_ms):
            OkExecutor.calls += 1
            return Success(status_code=204)

    scheduler = PrewarmScheduler(OkExecutor(), sleep=gated_sleep)

    first = scheduler.schedule()
    second = scheduler.schedule()
    assert first is second
    assert scheduler.pending

    release.set()
    await first
    assert OkExecutor.calls == 1
    assert not scheduler.pending

    third = scheduler.schedule()
    assert third is not first
    await third
    assert OkExecutor.calls == 2


async def test_cancel_stops_pending_prewarm():
    async def long_sleep(seconds):
        await asyncio.sleep(30)

    class NeverCalledExecutor(RequestExecutor):
        async def execute(self, spec, deadline_ms):
            raise AssertionError("prewarm should have been cancelled before sending")

    scheduler = PrewarmScheduler(NeverCalledExecutor(), sleep=long_sleep)
    task = scheduler.schedule()

    await scheduler.cancel()

    assert task.cancelled()
    assert not scheduler.pending
