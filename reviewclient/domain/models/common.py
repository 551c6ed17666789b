"""Defines common Value Objects used across the client.

These objects represent simple values like host names, base URLs, request
paths and the retry backoff policy, ensuring consistency and type safety.
"""

from dataclasses import dataclass
from typing import NewType

# === Endpoint Context ===
HostName = NewType("HostName", str)        # Host the application runs on (e.g., 'localhost')
BaseUrl = NewType("BaseUrl", str)          # Backend origin, without trailing slash
RequestPath = NewType("RequestPath", str)  # Path appended to the base URL (e.g., '/api/reviews')

# === Timing Context ===
Milliseconds = NewType("Milliseconds", int)

# --- Backend Paths ---
HEALTH_PATH = RequestPath("/healthz")
REVIEWS_PATH = RequestPath("/api/reviews")


@dataclass(frozen=True)
class BackoffPolicy:
    """Value Object representing retry backoff configuration.

    The delay before attempt k+1 (after failure number k) is
    ``base_delay_ms * k``: linear, not exponential. No delay precedes
    the first attempt.
    """
    max_attempts: int = 2
    base_delay_ms: int = 1000

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")

    def delay_after(self, failed_attempt: int) -> int:
        """Returns the backoff in milliseconds after the given failed attempt (1-based)."""
        return self.base_delay_ms * failed_attempt


DEFAULT_POLICY = BackoffPolicy(max_attempts=2, base_delay_ms=1000)

DEFAULT_DEADLINE_MS = Milliseconds(8000)  # Covers a cold start on the backend host
PREWARM_DEADLINE_MS = Milliseconds(5000)
PREWARM_DELAY_MS = Milliseconds(500)
