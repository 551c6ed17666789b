"""Infrastructure Layer: concrete implementations and adapters.

Endpoint resolution, the httpx-based executor, retry and prewarm services,
configuration, logging and console display.
"""
