"""
Application-level exceptions.

Per-identity failures (fetch, parse) are absorbed at the task boundary; cache
degradation is recovered inside the cache client. Only InvalidRequest and
ServiceUnavailable reach the HTTP layer.
"""

from __future__ import annotations


class LobbyRiskError(Exception):
    """Base class for all LobbyRisk errors."""


class InvalidRequest(LobbyRiskError):
    """Malformed batch input. Raised before any cache or pool work."""


class ServiceUnavailable(LobbyRiskError):
    """Process-scoped services are not initialized or have been closed."""


class CacheStoreError(LobbyRiskError):
    """Cache store could not serve a request."""


class CacheReadDegraded(CacheStoreError):
    """Store unavailable on read; the identity is treated as a cache miss."""


class CacheWriteDegraded(CacheStoreError):
    """Store unavailable on write; the score is returned but not persisted."""


class FetchFailure(LobbyRiskError):
    """Render capability failed for one identity (transport or HTTP status)."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class FetchTimeout(FetchFailure):
    """Render capability exceeded its time bound."""


class ParseFailure(LobbyRiskError):
    """Structured extraction failed for a rendered document."""
