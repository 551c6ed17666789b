"""Backend Resilience Implementations.

Contains the retry/backoff controller and the prewarm scheduler that hide
the backend's cold-start latency from callers.
Bounded Context: Backend Resilience
"""
