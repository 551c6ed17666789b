"""ReviewClient: the public facade used by forms, sliders and the CLI.

Wires the endpoint resolver, executor, retry controller, prewarm scheduler
and review service together, and exposes exactly three operations:
``prewarm()``, ``fetch_reviews()`` and ``submit_review(payload)``.

Typical use::

    async with ReviewClient(host="localhost") as client:   # prewarm starts here
        reviews = await client.fetch_reviews()
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

import httpx

from reviewclient.core.services.review_service import ReviewService
from reviewclient.domain.events.api_events import DomainEvent
from reviewclient.domain.interfaces.executor import RequestExecutor
from reviewclient.domain.models.common import (
    DEFAULT_DEADLINE_MS,
    DEFAULT_POLICY,
    PREWARM_DEADLINE_MS,
    PREWARM_DELAY_MS,
    BackoffPolicy,
    Milliseconds,
)
from reviewclient.domain.models.review import ReviewRecord, ServerAck, SubmissionPayload
from reviewclient.infrastructure.endpoint.resolver import (
    DEFAULT_ENDPOINTS,
    Endpoints,
    build_endpoint_config,
)
from reviewclient.infrastructure.http.executor import HttpExecutor
from reviewclient.infrastructure.resilience.api_retry import RetryController
from reviewclient.infrastructure.resilience.prewarm import PrewarmScheduler

logger = logging.getLogger(__name__)


class ReviewClient:
    """Resilient client for the review backend."""

    def __init__(
        self,
        host: Optional[str] = None,
        *,
        endpoints: Endpoints = DEFAULT_ENDPOINTS,
        policy: BackoffPolicy = DEFAULT_POLICY,
        deadline_ms: Milliseconds = DEFAULT_DEADLINE_MS,
        prewarm_delay_ms: Milliseconds = PREWARM_DELAY_MS,
        prewarm_deadline_ms: Milliseconds = PREWARM_DEADLINE_MS,
        auto_prewarm: bool = True,
        http_client: Optional[httpx.AsyncClient] = None,
        executor: Optional[RequestExecutor] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        event_listener: Optional[Callable[[DomainEvent], None]] = None,
    ):
        """Initializes the client.

        Args:
            host: Host name the application runs on; decides the backend URL.
            endpoints: Local and production backend addresses.
            policy: Retry policy for fetch_reviews and submit_review.
            deadline_ms: Per-attempt deadline for fetch_reviews and submit_review.
            prewarm_delay_ms: Delay before the warm-up call is sent.
            prewarm_deadline_ms: Deadline of the single warm-up attempt.
            auto_prewarm: Schedule a prewarm when entering ``async with``.
            http_client: Optional AsyncClient to send requests through.
            executor: Optional executor replacing the httpx-based one.
            sleep: Coroutine function used for all delays (seconds).
            event_listener: Optional callback receiving domain events.
        """
        self.endpoint = build_endpoint_config(host, endpoints)
        self.executor = executor or HttpExecutor(self.endpoint, client=http_client)
        self.retry_controller = RetryController(
            self.executor,
            default_policy=policy,
            default_deadline_ms=deadline_ms,
            sleep=sleep,
            event_listener=event_listener,
        )
        self.review_service = ReviewService(self.retry_controller)
        self.prewarm_scheduler = PrewarmScheduler(
            self.executor,
            delay_ms=prewarm_delay_ms,
            deadline_ms=prewarm_deadline_ms,
            sleep=sleep,
            event_listener=event_listener,
        )
        self.auto_prewarm = auto_prewarm
        self._prewarm_deferred = False
        logger.info(f"ReviewClient ready. BASE_URL: {self.endpoint.base_url}")

    @property
    def base_url(self) -> str:
        return self.endpoint.base_url

    def prewarm(self) -> Optional[asyncio.Task]:
        """Warms the backend in the background. Never raises.

        Runs immediately when an event loop is running; otherwise the
        prewarm is deferred until the client is entered with ``async with``.
        Calling it again while a prewarm is pending has no further effect.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop yet; deferring prewarm.")
            self._prewarm_deferred = True
            return None
        self._prewarm_deferred = False
        return self.prewarm_scheduler.schedule()

    async def fetch_reviews(self) -> List[ReviewRecord]:
        """Returns approved reviews. Raises ReviewsUnavailableError on failure."""
        return await self.review_service.fetch_reviews()

    async def submit_review(self, payload: SubmissionPayload) -> ServerAck:
        """Posts a review and returns the ack. Raises SubmissionFailedError on failure."""
        return await self.review_service.submit_review(payload)

    async def aclose(self) -> None:
        """Cancels a pending prewarm and closes the HTTP connection pool."""
        await self.prewarm_scheduler.cancel()
        await self.executor.aclose()

    async def __aenter__(self) -> "ReviewClient":
        if self.auto_prewarm or self._prewarm_deferred:
            self.prewarm()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
