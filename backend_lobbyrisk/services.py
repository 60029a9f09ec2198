"""
Process-scoped services: cache store, cache client, renderer, task pool, orchestrator.

Built once at startup (FastAPI lifespan) and shared read-only thereafter;
closed on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend_lobbyrisk.agent_worker.orchestrator import AggregationOrchestrator
from backend_lobbyrisk.agent_worker.pipeline import PipelineConfig, ProfilePipeline
from backend_lobbyrisk.agent_worker.pool import TaskPool
from backend_lobbyrisk.cache.client import CacheClient
from backend_lobbyrisk.cache.stores import CacheStore, RedisCacheStore, SqlCacheStore
from backend_lobbyrisk.config.settings import Settings
from backend_lobbyrisk.lobbyrisk_logging import get_logger
from backend_lobbyrisk.profile_source.render import HttpxRenderer, Renderer

logger = get_logger(__name__)


@dataclass
class Services:
    settings: Settings
    store: CacheStore
    cache: CacheClient
    pool: TaskPool
    orchestrator: AggregationOrchestrator

    async def close(self) -> None:
        await self.store.close()
        logger.info("services_stopped", cache_backend=self.settings.cache_backend)


async def create_store(settings: Settings) -> CacheStore:
    """Redis when REDIS_URL is set; otherwise the SQL store (tables created here)."""
    if settings.redis_url:
        store = RedisCacheStore(settings.redis_url, timeout_sec=settings.cache_timeout_sec)
        if await store.ping():
            logger.info("cache_redis_connected")
        else:
            # Reads and writes degrade per request until Redis comes back
            logger.error("cache_redis_unreachable")
        return store
    sql_store = SqlCacheStore(settings.cache_db_url)
    sql_store.init_db()
    return sql_store


async def create_services(
    settings: Settings,
    *,
    store: CacheStore | None = None,
    renderer: Renderer | None = None,
) -> Services:
    store = store or await create_store(settings)
    cache = CacheClient(store, ttl_seconds=settings.cache_ttl_sec)
    pipeline = ProfilePipeline(
        renderer or HttpxRenderer(),
        cache,
        PipelineConfig.from_settings(settings),
    )
    pool = TaskPool(pipeline, capacity=settings.pool_capacity)
    orchestrator = AggregationOrchestrator(
        cache,
        pool,
        batch_deadline_sec=settings.batch_deadline_sec,
    )
    logger.info(
        "services_started",
        cache_backend=settings.cache_backend,
        pool_capacity=settings.pool_capacity,
        render_timeout_sec=settings.render_timeout_sec,
        batch_deadline_sec=settings.batch_deadline_sec,
    )
    return Services(
        settings=settings,
        store=store,
        cache=cache,
        pool=pool,
        orchestrator=orchestrator,
    )
