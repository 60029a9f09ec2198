"""
Tests for process-scoped service wiring.
"""

from __future__ import annotations

import asyncio

from fakes import InMemoryStore, ScriptedRenderer, pages_for, profile_html

from backend_lobbyrisk.cache import SqlCacheStore
from backend_lobbyrisk.config import Settings
from backend_lobbyrisk.services import create_services, create_store


def test_create_services_wires_settings():
    store = InMemoryStore()
    renderer = ScriptedRenderer(pages_for("a", profile_html(private=True)))
    settings = Settings(pool_capacity=2, batch_deadline_sec=30.0, cache_ttl_sec=60)

    async def run():
        services = await create_services(settings, store=store, renderer=renderer)
        result = await services.orchestrator.resolve_batch(["a"])
        await services.close()
        return services, result

    services, result = asyncio.run(run())
    assert services.pool.capacity == 2
    assert services.cache.ttl_seconds == 60
    assert result.profiles == {"a": 99.9}
    assert store.closed


def test_create_store_defaults_to_sql(tmp_path):
    settings = Settings(cache_db_url=f"sqlite:///{tmp_path / 'c.db'}")

    async def run():
        store = await create_store(settings)
        await store.set("k", '{"riskScore": 1}', 60)
        value = await store.get("k")
        await store.close()
        return store, value

    store, value = asyncio.run(run())
    assert isinstance(store, SqlCacheStore)
    assert value == '{"riskScore": 1}'
