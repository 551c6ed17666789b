"""Background warm-up of a cold-starting backend.

Shortly after the application becomes interactive, a single low-priority
health check is sent so the backend is awake by the time the first real
request arrives. The call is fire-and-forget: its outcome is logged and
discarded and it never raises to, blocks or delays any other operation.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from reviewclient.domain.events.api_events import DomainEvent, PrewarmCompleted
from reviewclient.domain.interfaces.executor import RequestExecutor
from reviewclient.domain.models.common import (
    HEALTH_PATH,
    PREWARM_DEADLINE_MS,
    PREWARM_DELAY_MS,
    Milliseconds,
    RequestPath,
)
from reviewclient.domain.models.request import RequestSpec, Success

logger = logging.getLogger(__name__)


class PrewarmScheduler:
    """Schedules one detached health-check call with no retries."""

    def __init__(
        self,
        executor: RequestExecutor,
        delay_ms: Milliseconds = PREWARM_DELAY_MS,
        deadline_ms: Milliseconds = PREWARM_DEADLINE_MS,
        health_path: RequestPath = HEALTH_PATH,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        event_listener: Optional[Callable[[DomainEvent], None]] = None,
    ):
        self.executor = executor
        self.delay_ms = delay_ms
        self.deadline_ms = deadline_ms
        self.health_path = health_path
        self._sleep = sleep
        self._event_listener = event_listener
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self) -> asyncio.Task:
        """Starts the warm-up in the background and returns its task.

        Must be called from a running event loop. A prewarm that is still
        pending is reused rather than duplicated.
        """
        if self.pending:
            logger.debug("Prewarm already pending, not scheduling another.")
            return self._task
        # Keep a strong reference so the task is not collected mid-flight.
        self._task = asyncio.get_running_loop().create_task(self._run(), name="reviewclient-prewarm")
        self._task.add_done_callback(self._on_done)
        return self._task

    async def cancel(self) -> None:
        """Cancels a pending prewarm and waits for it to unwind."""
        if not self.pending:
            return
        self._task.cancel()
        await asyncio.wait({self._task})

    async def _run(self) -> bool:
        await self._sleep(self.delay_ms / 1000)
        logger.info("Prewarming backend...")
        outcome = await self.executor.execute(
            RequestSpec(method="GET", path=self.health_path),
            self.deadline_ms,
        )
        healthy = isinstance(outcome, Success)
        if healthy:
            logger.info("Backend ready.")
            self._notify(PrewarmCompleted(healthy=True))
        else:
            logger.warning(
                f"Prewarm failed ({outcome.reason}); the backend will wake up on the first real call."
            )
            self._notify(PrewarmCompleted(healthy=False, reason=outcome.reason))
        return healthy

    def _notify(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._event_listener is not None:
            self._event_listener(event)

    @staticmethod
    def _on_done(task: asyncio.Task) -> None:
        # Single sink for anything the prewarm task did not handle itself.
        if task.cancelled():
            logger.debug("Prewarm cancelled.")
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Prewarm aborted by unexpected error: {error!r}")
