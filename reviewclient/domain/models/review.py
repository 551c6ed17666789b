"""Domain models for reviews exchanged with the backend.

Both shapes are owned by the backend: the client reads ``ReviewRecord``
items without persisting them and posts ``SubmissionPayload`` bodies
without validating them (validation belongs to the form collaborator).
"""

from typing import Any, Dict, NotRequired, TypedDict


class ReviewRecord(TypedDict):
    """An approved review as returned by ``GET /api/reviews``."""
    name: str
    city: str
    message: str
    rating: int  # 0-5
    approvedAt: NotRequired[str]  # ISO-8601 timestamp, may be absent


class SubmissionPayload(TypedDict):
    """Body of ``POST /api/reviews``. ``website`` is a honeypot expected to be empty."""
    name: str
    city: str
    message: str
    email: str
    rating: int
    website: str


# Acknowledgment body returned by the backend, passed through unchanged.
ServerAck = Dict[str, Any]
