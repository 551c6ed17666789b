"""Service for executing backend calls with automatic retries.

Implements linear backoff for riding out cold starts and transient errors
(timeouts, connection failures, non-2xx responses). Attempts are strictly
sequential: a new attempt is only sent once the previous one has settled.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from reviewclient.domain.events.api_events import (
    AttemptFailed,
    AttemptStarted,
    AttemptSucceeded,
    DomainEvent,
    RetriesExhausted,
    RetryScheduled,
)
from reviewclient.domain.interfaces.executor import RequestExecutor
from reviewclient.domain.models.common import (
    DEFAULT_DEADLINE_MS,
    DEFAULT_POLICY,
    BackoffPolicy,
    Milliseconds,
)
from reviewclient.domain.models.request import Outcome, RequestSpec, Success

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]
EventListener = Callable[[DomainEvent], None]


class RetryController:
    """Repeats a request through an executor under a bounded backoff policy."""

    def __init__(
        self,
        executor: RequestExecutor,
        default_policy: BackoffPolicy = DEFAULT_POLICY,
        default_deadline_ms: Milliseconds = DEFAULT_DEADLINE_MS,
        sleep: SleepFunc = asyncio.sleep,
        event_listener: Optional[EventListener] = None,
    ):
        """Initializes the RetryController.

        Args:
            executor: Executor used for every attempt.
            default_policy: Policy used when a call does not pass its own.
            default_deadline_ms: Per-attempt deadline used when a call does not pass its own.
            sleep: Coroutine function used for backoff, taking seconds.
            event_listener: Optional callback receiving domain events.
        """
        self.executor = executor
        self.default_policy = default_policy
        self.default_deadline_ms = default_deadline_ms
        self._sleep = sleep
        self._event_listener = event_listener

        logger.info(
            f"RetryController initialized: max_attempts={default_policy.max_attempts}, "
            f"base_delay={default_policy.base_delay_ms}ms, deadline={default_deadline_ms}ms"
        )

    def _dispatch(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self._event_listener is not None:
            self._event_listener(event)

    async def with_retries(
        self,
        spec: RequestSpec,
        policy: Optional[BackoffPolicy] = None,
        deadline_ms: Optional[Milliseconds] = None,
    ) -> Outcome:
        """Executes a request, retrying failed attempts with linear backoff.

        Every failure kind consumes the same attempt budget. Only the last
        attempt's failure is returned; earlier failures are logged.
        Cancelling the awaiting task cancels the in-flight attempt or the
        pending backoff sleep.

        Args:
            spec: The request to send.
            policy: Attempt budget and base delay (defaults to the controller's).
            deadline_ms: Fresh deadline applied to each attempt.

        Returns:
            The first Success, or the failure of the final attempt.
        """
        effective_policy = policy or self.default_policy
        effective_deadline = deadline_ms if deadline_ms is not None else self.default_deadline_ms
        max_attempts = effective_policy.max_attempts
        target = f"{spec.method} {spec.path}"

        outcome: Optional[Outcome] = None
        for attempt in range(1, max_attempts + 1):
            logger.info(f"Attempt {attempt}/{max_attempts}: {target}")
            self._dispatch(AttemptStarted(
                method=spec.method, path=spec.path,
                attempt_number=attempt, max_attempts=max_attempts,
            ))

            outcome = await self.executor.execute(spec, effective_deadline)

            if isinstance(outcome, Success):
                self._dispatch(AttemptSucceeded(
                    method=spec.method, path=spec.path, attempt_number=attempt,
                    status_code=outcome.status_code, latency_ms=outcome.latency_ms,
                ))
                return outcome

            logger.warning(f"Attempt {attempt}/{max_attempts} failed for {target}: {outcome.reason}")
            self._dispatch(AttemptFailed(
                method=spec.method, path=spec.path, attempt_number=attempt,
                failure_kind=outcome.kind.value, reason=outcome.reason,
            ))

            if attempt < max_attempts:
                delay_ms = effective_policy.delay_after(attempt)
                self._dispatch(RetryScheduled(
                    method=spec.method, path=spec.path,
                    attempt_number=attempt, delay_ms=delay_ms,
                ))
                logger.debug(f"Waiting {delay_ms} ms before retrying {target}")
                await self._sleep(delay_ms / 1000)

        logger.error(f"Attempt budget ({max_attempts}) exhausted for {target}. Last failure: {outcome.reason}")
        self._dispatch(RetriesExhausted(
            method=spec.method, path=spec.path, attempts=max_attempts,
            failure_kind=outcome.kind.value, reason=outcome.reason,
        ))
        return outcome
