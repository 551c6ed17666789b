"""Application Service for reading and submitting reviews.

Builds the backend requests, runs them through the RetryController and
maps the final outcome to either a result or a user-safe error.
"""

import logging
from typing import List, Optional

from reviewclient.domain.models.common import REVIEWS_PATH, BackoffPolicy, Milliseconds
from reviewclient.domain.models.errors import (
    ExhaustedRetriesError,
    ReviewsUnavailableError,
    SubmissionFailedError,
)
from reviewclient.domain.models.request import Outcome, RequestSpec, Success
from reviewclient.domain.models.review import ReviewRecord, ServerAck, SubmissionPayload
from reviewclient.infrastructure.resilience.api_retry import RetryController

logger = logging.getLogger(__name__)

JSON_ACCEPT = {"Accept": "application/json"}
JSON_CONTENT = {"Content-Type": "application/json", "Accept": "application/json"}


class ReviewService:
    """Implements fetch_reviews and submit_review on top of the retry controller."""

    def __init__(
        self,
        retry_controller: RetryController,
        policy: Optional[BackoffPolicy] = None,
        deadline_ms: Optional[Milliseconds] = None,
    ):
        self.retry_controller = retry_controller
        self.policy = policy
        self.deadline_ms = deadline_ms

    async def _send(self, spec: RequestSpec) -> Outcome:
        return await self.retry_controller.with_retries(spec, self.policy, self.deadline_ms)

    def _exhausted(self, operation: str, outcome: Outcome) -> ExhaustedRetriesError:
        """Logs the technical failure behind a user-safe error."""
        attempts = (self.policy or self.retry_controller.default_policy).max_attempts
        cause = ExhaustedRetriesError(outcome, attempts)
        logger.error(f"{operation} failed: {cause}")
        return cause

    async def fetch_reviews(self) -> List[ReviewRecord]:
        """Fetches approved reviews.

        Returns:
            The ``reviews`` list from the response body, or an empty list when
            the field is missing (no reviews is a valid state).

        Raises:
            ReviewsUnavailableError: If every attempt failed or the body is not JSON.
        """
        outcome = await self._send(RequestSpec(method="GET", path=REVIEWS_PATH, headers=JSON_ACCEPT))
        if not isinstance(outcome, Success):
            raise ReviewsUnavailableError() from self._exhausted("fetch_reviews", outcome)

        try:
            data = outcome.json()
        except ValueError as e:
            logger.error(f"fetch_reviews received an undecodable body: {e}")
            raise ReviewsUnavailableError() from e

        reviews = data.get("reviews") if isinstance(data, dict) else None
        if not isinstance(reviews, list):
            if reviews is not None:
                logger.warning(f"Ignoring non-list 'reviews' field of type {type(reviews).__name__}")
            return []
        logger.info(f"Fetched {len(reviews)} review(s).")
        return reviews

    async def submit_review(self, payload: SubmissionPayload) -> ServerAck:
        """Submits a review and returns the backend acknowledgment verbatim.

        The payload is sent as-is; validating it (including the ``website``
        honeypot) is the caller's job.

        A POST is retried like any other call. If the backend stored the
        review but its response was lost before it could be classified, the
        retry stores it a second time. Sending twice is preferred over
        losing a submission; no idempotency key is sent.

        Raises:
            SubmissionFailedError: If every attempt failed or the ack is not JSON.
        """
        spec = RequestSpec(method="POST", path=REVIEWS_PATH, headers=JSON_CONTENT, body=payload)
        outcome = await self._send(spec)
        if not isinstance(outcome, Success):
            raise SubmissionFailedError() from self._exhausted("submit_review", outcome)

        if not outcome.content:
            # 201/204 with an empty body still means the review was accepted
            return {}
        try:
            ack = outcome.json()
        except ValueError as e:
            logger.error(f"submit_review received an undecodable acknowledgment: {e}")
            raise SubmissionFailedError() from e
        logger.info("Review submitted successfully.")
        return ack
