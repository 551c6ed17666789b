"""Unit tests for the deadline-bounded httpx executor."""

import asyncio
import json
import time

import httpx
import pytest

from reviewclient.domain.models.common import Milliseconds, RequestPath
from reviewclient.domain.models.request import (
    FailureKind,
    RequestSpec,
    RetryableFailure,
    Success,
    TerminalFailure,
)
from reviewclient.infrastructure.http.executor import HttpExecutor

pytestmark = pytest.mark.asyncio

REVIEWS = RequestPath("/api/reviews")


async def test_success_returns_body_and_status(local_endpoint, make_handler, make_http_client):
    handler = make_handler(httpx.Response(200, json={"reviews": []}))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))

    outcome = await executor.execute(RequestSpec("GET", REVIEWS, {"Accept": "application/json"}), Milliseconds(1000))

    assert isinstance(outcome, Success)
    assert outcome.status_code == 200
    assert outcome.json() == {"reviews": []}
    assert outcome.latency_ms is not None
    request = handler.requests[0]
    assert str(request.url) == "http://localhost:3000/api/reviews"
    assert request.headers["accept"] == "application/json"


async def test_json_body_is_serialized(local_endpoint, make_handler, make_http_client):
    handler = make_handler(httpx.Response(201, json={"ok": True}))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))
    body = {"name": "Anne", "rating": 5}

    await executor.execute(RequestSpec("post", REVIEWS, {"Content-Type": "application/json"}, body), Milliseconds(1000))

    request = handler.requests[0]
    assert request.method == "POST"
    assert json.loads(request.content) == body


@pytest.mark.parametrize("status", [301, 400, 404, 429, 500, 503])
async def test_non_2xx_is_a_retryable_status_failure(status, local_endpoint, make_handler, make_http_client):
    # follow_redirects is off on the test client, so a 301 stays a 301
    executor = HttpExecutor(local_endpoint, client=make_http_client(make_handler(httpx.Response(status))))

    outcome = await executor.execute(RequestSpec("GET", REVIEWS), Milliseconds(1000))

    assert outcome == RetryableFailure(FailureKind.STATUS, f"http status: {status}", status_code=status)


async def test_network_error_is_a_retryable_transport_failure(local_endpoint, make_handler, make_http_client):
    handler = make_handler(httpx.ConnectError("connection refused"))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))

    outcome = await executor.execute(RequestSpec("GET", REVIEWS), Milliseconds(1000))

    assert isinstance(outcome, RetryableFailure)
    assert outcome.kind is FailureKind.TRANSPORT
    assert outcome.reason == "network: connection refused"


async def test_deadline_expiry_cancels_call_and_returns_timeout(local_endpoint, make_http_client):
    cancelled = asyncio.Event()

    async def hanging_handler(request):
        try:
            await asyncio.sleep(30)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return httpx.Response(200)

    executor = HttpExecutor(local_endpoint, client=make_http_client(hanging_handler))

    started = time.monotonic()
    outcome = await executor.execute(RequestSpec("GET", REVIEWS), Milliseconds(50))
    elapsed = time.monotonic() - started

    assert outcome == RetryableFailure(FailureKind.TIMEOUT, "timeout")
    assert elapsed < 1.0
    assert cancelled.is_set()


async def test_httpx_timeout_is_reported_as_timeout(local_endpoint, make_handler, make_http_client):
    handler = make_handler(httpx.ReadTimeout("read timed out"))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))

    outcome = await executor.execute(RequestSpec("GET", REVIEWS), Milliseconds(1000))

    assert outcome == RetryableFailure(FailureKind.TIMEOUT, "timeout")


async def test_unserializable_body_is_a_terminal_failure(local_endpoint, make_handler, make_http_client):
    handler = make_handler(httpx.Response(200))
    executor = HttpExecutor(local_endpoint, client=make_http_client(handler))

    outcome = await executor.execute(RequestSpec("POST", REVIEWS, body={"when": object()}), Milliseconds(1000))

    assert isinstance(outcome, TerminalFailure)
    assert outcome.kind is FailureKind.INVALID_REQUEST
    assert handler.requests == []


async def test_aclose_leaves_injected_client_open(local_endpoint, make_handler, make_http_client):
    client = make_http_client(make_handler(httpx.Response(204)))
    executor = HttpExecutor(local_endpoint, client=client)

    await executor.aclose()

    assert not client.is_closed
    await client.aclose()


async def test_aclose_closes_owned_client(local_endpoint):
    executor = HttpExecutor(local_endpoint)

    await executor.aclose()

    assert executor._client.is_closed
