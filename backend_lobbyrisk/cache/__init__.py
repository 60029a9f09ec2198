"""
Cache layer: profile snapshots keyed by identity with a 7-day retention window.
"""

from backend_lobbyrisk.cache.client import CacheClient
from backend_lobbyrisk.cache.stores import CacheStore, RedisCacheStore, SqlCacheStore

__all__ = ["CacheClient", "CacheStore", "RedisCacheStore", "SqlCacheStore"]
