"""reviewclient: resilient async client for a cold-starting review backend."""

from reviewclient.core.client import ReviewClient
from reviewclient.domain.models.errors import (
    ClientFacingError,
    ReviewsUnavailableError,
    SubmissionFailedError,
)

__all__ = [
    "ReviewClient",
    "ClientFacingError",
    "ReviewsUnavailableError",
    "SubmissionFailedError",
]
