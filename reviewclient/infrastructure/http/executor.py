"""Concrete implementation of the RequestExecutor interface using httpx.

Wraps a single outbound call with a hard deadline. When the deadline fires
the in-flight request is cancelled and the attempt is reported as a
timeout; network errors and non-2xx responses are classified into failure
outcomes instead of being raised.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

from reviewclient.domain.interfaces.executor import RequestExecutor
from reviewclient.domain.models.common import Milliseconds
from reviewclient.domain.models.request import (
    FailureKind,
    Outcome,
    RequestSpec,
    RetryableFailure,
    Success,
    TerminalFailure,
)
from reviewclient.infrastructure.endpoint.resolver import EndpointConfig

logger = logging.getLogger(__name__)

TIMEOUT_REASON = "timeout"


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class HttpExecutor(RequestExecutor):
    """Deadline-bounded executor backed by :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        endpoint: EndpointConfig,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initializes the executor.

        Args:
            endpoint: Resolved, read-only endpoint configuration.
            client: Optional pre-built AsyncClient (tests pass one with a
                MockTransport). The executor only closes clients it created.
        """
        self.endpoint = endpoint
        self._owns_client = client is None
        # The per-attempt deadline is the only timeout; httpx's own timeouts are disabled.
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(None),
            follow_redirects=True,
        )
        logger.debug(f"HttpExecutor initialized for {endpoint.base_url}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def execute(self, spec: RequestSpec, deadline_ms: Milliseconds) -> Outcome:
        url = self.endpoint.url_for(spec.path)
        try:
            request = self._client.build_request(
                spec.method,
                url,
                headers=dict(spec.headers),
                json=spec.body,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            logger.error(f"Cannot build {spec.method} {url}: {e}")
            return TerminalFailure(FailureKind.INVALID_REQUEST, f"invalid request: {_describe(e)}")

        start_time = time.perf_counter()
        try:
            # wait_for cancels the send task when the deadline elapses, and
            # drops its timer as soon as the send settles.
            response = await asyncio.wait_for(self._client.send(request), timeout=deadline_ms / 1000)
        except asyncio.TimeoutError:
            logger.debug(f"{spec.method} {url} exceeded its {deadline_ms} ms deadline")
            return RetryableFailure(FailureKind.TIMEOUT, TIMEOUT_REASON)
        except httpx.TimeoutException:
            return RetryableFailure(FailureKind.TIMEOUT, TIMEOUT_REASON)
        except httpx.UnsupportedProtocol as e:
            return TerminalFailure(FailureKind.INVALID_REQUEST, f"invalid request: {_describe(e)}")
        except httpx.HTTPError as e:
            return RetryableFailure(FailureKind.TRANSPORT, f"network: {_describe(e)}")

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"{spec.method} {url} -> {response.status_code} in {latency_ms:.0f} ms")

        if not response.is_success:
            return RetryableFailure(
                FailureKind.STATUS,
                f"http status: {response.status_code}",
                status_code=response.status_code,
            )
        return Success(
            status_code=response.status_code,
            content=response.content,
            latency_ms=latency_ms,
        )
