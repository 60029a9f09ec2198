"""
Pytest fixtures for LobbyRisk tests. Wires the real cache client, pipeline, pool
and orchestrator over an in-memory store and a scripted renderer.
"""

from __future__ import annotations

import pytest

from fakes import BASE_URL, InMemoryStore, ScriptedRenderer

from backend_lobbyrisk.agent_worker import AggregationOrchestrator, PipelineConfig, ProfilePipeline, TaskPool
from backend_lobbyrisk.cache import CacheClient


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def renderer():
    return ScriptedRenderer()


@pytest.fixture
def cache_client(memory_store):
    return CacheClient(memory_store)


@pytest.fixture
def pipeline(renderer, cache_client):
    return ProfilePipeline(renderer, cache_client, PipelineConfig(profile_base_url=BASE_URL))


@pytest.fixture
def orchestrator(cache_client, pipeline):
    return AggregationOrchestrator(cache_client, TaskPool(pipeline, capacity=5))


@pytest.fixture
def client(orchestrator):
    """FastAPI TestClient with the orchestrator dependency pointed at the test wiring."""
    from fastapi.testclient import TestClient

    from backend_lobbyrisk.api_server.server import app, get_orchestrator

    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()
