"""Domain Event definitions.

Represents significant occurrences during a request's lifetime (attempts,
retries, prewarm results) that listeners such as loggers may react to.
"""
