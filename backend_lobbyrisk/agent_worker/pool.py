"""
Bounded-concurrency task pool for fetch-and-score pipelines.

At most `capacity` pipelines run at once; further requests wait for a slot
(not an error). Each task is isolated: failures are logged and returned as a
TaskResult failure marker, never raised, so sibling tasks are unaffected.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from backend_lobbyrisk.analysis_engine.models import TaskResult
from backend_lobbyrisk.config.settings import DEFAULT_POOL_CAPACITY
from backend_lobbyrisk.core.exceptions import FetchFailure, FetchTimeout, LobbyRiskError, ParseFailure
from backend_lobbyrisk.lobbyrisk_logging import get_logger

logger = get_logger(__name__)


class Pipeline(Protocol):
    async def run(self, identity: str) -> float: ...


def _failure_kind(exc: BaseException) -> str:
    if isinstance(exc, FetchTimeout):
        return "fetch_timeout"
    if isinstance(exc, FetchFailure):
        return "fetch_failure"
    if isinstance(exc, ParseFailure):
        return "parse_failure"
    return "internal_error"


class TaskPool:
    """asyncio.Semaphore-bounded executor; one pipeline run per execute()."""

    def __init__(self, pipeline: Pipeline, capacity: int = DEFAULT_POOL_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._pipeline = pipeline
        self.capacity = capacity
        self._slots = asyncio.Semaphore(capacity)
        self.active = 0
        self.queued = 0
        self.peak_active = 0

    async def execute(self, identity: str) -> TaskResult:
        """Run the pipeline for one identity once a slot is free; never raises for task errors."""
        self.queued += 1
        try:
            await self._slots.acquire()
        finally:
            self.queued -= 1
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            score = await self._pipeline.run(identity)
            return TaskResult.success(identity, score)
        except LobbyRiskError as e:
            kind = _failure_kind(e)
            logger.warning("task_failed", identity=identity, kind=kind, error=str(e))
            return TaskResult.failure(identity, kind)
        except Exception as e:
            logger.exception("task_failed", identity=identity, kind="internal_error", error=str(e))
            return TaskResult.failure(identity, "internal_error")
        finally:
            self.active -= 1
            self._slots.release()
