"""Domain Events related to backend calls and resilience.

Examples include events for when an attempt starts, fails, is retried,
or when a prewarm call completes.
"""

from dataclasses import dataclass, field
import time
from typing import Optional

# Base Event Class
@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

# --- Specific Request Events ---

@dataclass
class AttemptStarted(DomainEvent):
    """Event triggered when an attempt is about to be sent."""
    method: str
    path: str
    attempt_number: int
    max_attempts: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class AttemptSucceeded(DomainEvent):
    """Event triggered when an attempt returns a 2xx response."""
    method: str
    path: str
    attempt_number: int
    status_code: int
    latency_ms: Optional[float] = None
    timestamp: float = field(default_factory=time.time)

@dataclass
class AttemptFailed(DomainEvent):
    """Event triggered when a single attempt fails (it may still be retried)."""
    method: str
    path: str
    attempt_number: int
    failure_kind: str
    reason: str
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a backoff delay is scheduled before the next attempt."""
    method: str
    path: str
    attempt_number: int # The attempt that just failed
    delay_ms: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetriesExhausted(DomainEvent):
    """Event triggered when the attempt budget is consumed without success."""
    method: str
    path: str
    attempts: int
    failure_kind: str
    reason: str
    timestamp: float = field(default_factory=time.time)

@dataclass
class PrewarmCompleted(DomainEvent):
    """Event triggered when the background warm-up call settles, whatever its outcome."""
    healthy: bool
    reason: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
