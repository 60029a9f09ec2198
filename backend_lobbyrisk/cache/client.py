"""
Cache client: cache-first lookup protocol over a CacheStore.

batch_get returns the cached risk score for every identity with a live entry;
absent identities are misses. Store failures never propagate: a failed read is
a miss (cache_read_degraded), a failed write leaves the score unpersisted
(cache_write_degraded).
"""

from __future__ import annotations

import asyncio
import json
import math
from typing import Iterable

from backend_lobbyrisk.analysis_engine.models import ProfileSnapshot
from backend_lobbyrisk.analysis_engine.scorer import MAX_SCORE
from backend_lobbyrisk.cache.stores import CacheStore
from backend_lobbyrisk.config.settings import CACHE_TTL_SEC
from backend_lobbyrisk.core.exceptions import CacheReadDegraded, CacheWriteDegraded
from backend_lobbyrisk.lobbyrisk_logging import get_logger

logger = get_logger(__name__)


def _score_from_payload(payload: str) -> float:
    """Extract riskScore from a serialized snapshot. Raises ValueError when malformed."""
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        raise ValueError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("snapshot payload is not an object")
    score = data.get("riskScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise ValueError("snapshot payload has no numeric riskScore")
    score = float(score)
    if not math.isfinite(score) or not 0 <= score <= MAX_SCORE:
        raise ValueError(f"riskScore out of range: {score!r}")
    return score


class CacheClient:
    """Wraps a CacheStore with the snapshot format and degraded-mode handling."""

    def __init__(self, store: CacheStore, *, ttl_seconds: int = CACHE_TTL_SEC) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds

    async def _get_one(self, identity: str) -> float | None:
        try:
            payload = await self._store.get(identity)
        except CacheReadDegraded as e:
            logger.warning("cache_read_degraded", identity=identity, error=str(e))
            return None
        if payload is None:
            return None
        try:
            return _score_from_payload(payload)
        except ValueError as e:
            logger.warning("cache_entry_invalid", identity=identity, error=str(e))
            return None

    async def batch_get(self, identities: Iterable[str]) -> dict[str, float]:
        """Return identity -> risk score for every live entry; misses are absent."""
        keys = list(dict.fromkeys(identities))
        if not keys:
            return {}
        scores = await asyncio.gather(*(self._get_one(k) for k in keys))
        hits = {k: s for k, s in zip(keys, scores) if s is not None}
        logger.debug("cache_batch_get", requested=len(keys), hits=len(hits))
        return hits

    async def set(
        self,
        identity: str,
        snapshot: ProfileSnapshot,
        ttl_seconds: int | None = None,
    ) -> bool:
        """
        Store the full snapshot, replacing any prior entry and restarting expiry.

        Returns False when the store is unavailable (the caller keeps the score).
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        try:
            await self._store.set(identity, snapshot.to_json(), ttl)
        except CacheWriteDegraded as e:
            logger.warning("cache_write_degraded", identity=identity, error=str(e))
            return False
        return True
