"""Interface for executing a single outbound request.

Defines the contract the retry controller and the prewarm scheduler rely
on, hiding the HTTP library behind a domain-level Outcome.
"""

import abc

from reviewclient.domain.models.common import Milliseconds
from reviewclient.domain.models.request import Outcome, RequestSpec


class RequestExecutor(abc.ABC):
    """Abstract Base Class for deadline-bounded request execution."""

    @abc.abstractmethod
    async def execute(self, spec: RequestSpec, deadline_ms: Milliseconds) -> Outcome:
        """Sends one request and classifies the result.

        Args:
            spec: Description of the request to send.
            deadline_ms: Hard deadline for this single attempt.

        Returns:
            Success for a 2xx response, otherwise a RetryableFailure or
            TerminalFailure. Network and HTTP problems are never raised.
        """
        pass

    async def aclose(self) -> None:
        """Releases any resources (connection pools) held by the executor."""
        pass
