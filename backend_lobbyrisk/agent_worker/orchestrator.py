"""
Aggregation orchestrator: one request batch -> LobbyResult.

Cache lookup for the whole batch, misses dispatched to the task pool as
independent tasks, join on all of them (or the optional batch deadline), merge
hits with successful results in request order, then aggregate.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from backend_lobbyrisk.agent_worker.pool import TaskPool
from backend_lobbyrisk.analysis_engine.lobby import lobby_risk_exponential
from backend_lobbyrisk.analysis_engine.models import LobbyResult, TaskResult
from backend_lobbyrisk.cache.client import CacheClient
from backend_lobbyrisk.core.exceptions import InvalidRequest
from backend_lobbyrisk.lobbyrisk_logging import get_logger

logger = get_logger(__name__)

INVALID_BATCH_MESSAGE = "Usernames must be a non-empty array"


def validate_batch(identities: Any) -> list[str]:
    """
    Return the distinct identities in first-seen order, exactly as given.

    Identities are opaque keys: they are never trimmed or normalized, so the
    response and the cache use the caller's strings. Whitespace-only strings
    are rejected.

    Raises:
        InvalidRequest: not a non-empty list/tuple of non-empty strings.
    """
    if not isinstance(identities, (list, tuple)) or not identities:
        raise InvalidRequest(INVALID_BATCH_MESSAGE)
    for identity in identities:
        if not isinstance(identity, str) or not identity.strip():
            raise InvalidRequest(INVALID_BATCH_MESSAGE)
    return list(dict.fromkeys(identities))


class AggregationOrchestrator:
    """Cache-first batch resolution over a CacheClient and a TaskPool."""

    def __init__(
        self,
        cache: CacheClient,
        pool: TaskPool,
        *,
        batch_deadline_sec: float | None = None,
    ) -> None:
        self._cache = cache
        self._pool = pool
        self.batch_deadline_sec = batch_deadline_sec
        # Tasks abandoned at the deadline keep running so they still populate the cache
        self._stragglers: set[asyncio.Task[TaskResult]] = set()

    @property
    def straggler_count(self) -> int:
        return len(self._stragglers)

    async def _dispatch(self, misses: Sequence[str]) -> dict[str, float]:
        if not misses:
            return {}
        tasks = [
            asyncio.create_task(self._pool.execute(identity), name=f"fetch-score:{identity}")
            for identity in misses
        ]
        done, pending = await asyncio.wait(tasks, timeout=self.batch_deadline_sec)
        if pending:
            logger.warning(
                "batch_deadline_exceeded",
                deadline_sec=self.batch_deadline_sec,
                pending=len(pending),
                completed=len(done),
            )
            for task in pending:
                self._stragglers.add(task)
                task.add_done_callback(self._stragglers.discard)

        fetched: dict[str, float] = {}
        for task in done:
            result = task.result()
            if result.ok:
                fetched[result.identity] = result.risk_score
        return fetched

    async def resolve_batch(self, identities: Any) -> LobbyResult:
        """Resolve a batch of identities into per-identity scores plus the lobby aggregate."""
        batch = validate_batch(identities)

        cached = await self._cache.batch_get(batch)
        misses = [i for i in batch if i not in cached]
        fetched = await self._dispatch(misses)

        merged = {**cached, **fetched}
        profiles = {i: merged[i] for i in batch if i in merged}
        lobby_risk = lobby_risk_exponential(profiles.values())

        logger.info(
            "batch_resolved",
            requested=len(batch),
            cache_hits=len(cached),
            dispatched=len(misses),
            fetched=len(fetched),
            failed=len(misses) - len(fetched),
            lobby_risk=lobby_risk,
        )
        return LobbyResult(profiles=profiles, lobby_risk=lobby_risk)
