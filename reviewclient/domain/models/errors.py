"""Exceptions raised by the review client.

Only ``ClientFacingError`` subclasses ever reach collaborators (forms,
sliders, the CLI). Their messages are safe to show to end users; the
technical cause travels separately as ``ExhaustedRetriesError`` in the
exception chain and in the logs.
"""

from typing import Optional

from .request import Failure


class ExhaustedRetriesError(Exception):
    """Raised internally when the attempt budget is consumed without success."""

    def __init__(self, last_failure: Failure, attempts: int):
        self.last_failure = last_failure
        self.attempts = attempts
        super().__init__(
            f"Attempt budget ({attempts}) exhausted. "
            f"Last failure [{last_failure.kind.value}]: {last_failure.reason}"
        )


class ClientFacingError(Exception):
    """Base class for errors surfaced to UI collaborators."""

    default_message = "The service is temporarily unavailable."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ReviewsUnavailableError(ClientFacingError):
    """Reviews could not be loaded."""

    default_message = "Reviews unavailable"


class SubmissionFailedError(ClientFacingError):
    """A review submission could not be delivered."""

    default_message = "Unable to send your review. Please try again."
