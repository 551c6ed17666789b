"""Domain models describing one outbound request and the outcome of an attempt.

An ``Outcome`` is one of ``Success``, ``RetryableFailure`` or
``TerminalFailure``. Executors never raise for network or HTTP problems;
they return a failure outcome so the retry controller can decide what to do.
"""

import enum
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .common import RequestPath


class FailureKind(str, enum.Enum):
    """Why an attempt failed. Used for logging only, never shown to end users."""
    TIMEOUT = "timeout"                  # Deadline elapsed before the call settled
    TRANSPORT = "transport"              # DNS, connection refused, reset, aborted
    STATUS = "status"                    # Response received with a non-2xx status
    INVALID_REQUEST = "invalid_request"  # Request could not be built or sent at all


@dataclass(frozen=True)
class RequestSpec:
    """Immutable description of a single logical request, built per call."""
    method: str
    path: RequestPath
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[Any] = None  # JSON-serializable payload, sent as the request body

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


@dataclass(frozen=True)
class Success:
    """A 2xx response whose body has been fully read."""
    status_code: int
    content: bytes = b""
    latency_ms: Optional[float] = None

    def json(self) -> Any:
        """Decodes the body as JSON. Raises ValueError on malformed content.

        The raw bytes go to json.loads, which detects UTF-8 (with or
        without a BOM), UTF-16 and UTF-32.
        """
        return json.loads(self.content)


@dataclass(frozen=True)
class RetryableFailure:
    """A failed attempt that the retry controller may repeat."""
    kind: FailureKind
    reason: str
    status_code: Optional[int] = None


@dataclass(frozen=True)
class TerminalFailure:
    """A failed attempt whose request could not be issued at all.

    The retry controller does not treat it differently from a
    RetryableFailure; it still consumes the attempt budget.
    """
    kind: FailureKind
    reason: str
    status_code: Optional[int] = None


Failure = Union[RetryableFailure, TerminalFailure]
Outcome = Union[Success, RetryableFailure, TerminalFailure]
