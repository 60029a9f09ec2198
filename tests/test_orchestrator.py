"""
Tests for batch resolution: cache-hit bypass, miss dispatch, merge, and aggregate.
"""

from __future__ import annotations

import asyncio

import pytest

from fakes import BASE_URL, FailingStore, InMemoryStore, ScriptedRenderer, comments_html, pages_for, profile_html

from backend_lobbyrisk.agent_worker import AggregationOrchestrator, PipelineConfig, ProfilePipeline, TaskPool
from backend_lobbyrisk.cache import CacheClient
from backend_lobbyrisk.core.exceptions import InvalidRequest


def _orchestrator(store, renderer, **kwargs) -> AggregationOrchestrator:
    cache = CacheClient(store)
    pipeline = ProfilePipeline(renderer, cache, PipelineConfig(profile_base_url=BASE_URL))
    return AggregationOrchestrator(cache, TaskPool(pipeline, capacity=5), **kwargs)


def test_cache_hits_bypass_pool(memory_store, renderer, orchestrator):
    """Identities present in the cache cause zero render calls."""
    memory_store.seed("a", 20.0)
    memory_store.seed("b", 0.0)
    result = asyncio.run(orchestrator.resolve_batch(["a", "b"]))
    assert result.profiles == {"a": 20.0, "b": 0.0}
    assert renderer.calls == []
    assert renderer.sessions_opened == 0


def test_misses_fetched_and_merged_in_request_order(memory_store, renderer, orchestrator):
    memory_store.seed("hit", 99.9)
    renderer.pages.update(pages_for("miss", profile_html(), comments_html([])))
    result = asyncio.run(orchestrator.resolve_batch(["miss", "hit"]))
    assert list(result.profiles) == ["miss", "hit"]
    assert result.profiles == {"miss": 50, "hit": 99.9}
    assert result.lobby_risk == pytest.approx(93.04, abs=0.02)
    assert all(not url.startswith(f"{BASE_URL}/hit/") for url in renderer.calls)
    # miss is now cached for the next batch
    assert memory_store.payload("miss")["riskScore"] == 50


def test_failed_identities_omitted(renderer, orchestrator):
    renderer.pages.update(pages_for("ok", profile_html(private=True)))
    result = asyncio.run(orchestrator.resolve_batch(["ok", "gone"]))
    assert result.profiles == {"ok": 99.9}
    assert result.lobby_risk == pytest.approx(99.9, abs=0.01)


def test_all_failed_no_hits_is_max_risk(orchestrator):
    result = asyncio.run(orchestrator.resolve_batch(["x", "y"]))
    assert result.profiles == {}
    assert result.lobby_risk == 100
    assert result.to_dict() == {"profiles": {}, "lobbyRisk": 100}


def test_duplicates_collapse(renderer, orchestrator):
    renderer.pages.update(pages_for("a", profile_html(private=True)))
    result = asyncio.run(orchestrator.resolve_batch(["a", "a", "a"]))
    assert result.profiles == {"a": 99.9}
    assert renderer.sessions_opened == 1


def test_read_outage_does_not_change_aggregate():
    """Store outage on read: same aggregate as a working store for fetched misses."""
    ids = ["p1", "p2", "p3"]
    pages = {}
    pages.update(pages_for("p1", profile_html(), comments_html([])))
    pages.update(pages_for("p2", profile_html(private=True)))
    pages.update(pages_for("p3", profile_html(level="40", friends="90"), comments_html(["xitado"])))

    working = _orchestrator(InMemoryStore(), ScriptedRenderer(pages))
    degraded = _orchestrator(FailingStore(fail_reads=True), ScriptedRenderer(pages))

    expected = asyncio.run(working.resolve_batch(ids))
    actual = asyncio.run(degraded.resolve_batch(ids))
    assert actual.profiles == expected.profiles
    assert actual.lobby_risk == expected.lobby_risk


@pytest.mark.parametrize("batch", [[], (), None, "765", {"usernames": ["a"]}, [""], ["  "], [1], ["a", None]])
def test_invalid_batches_rejected_before_any_work(batch, memory_store, renderer, orchestrator):
    with pytest.raises(InvalidRequest, match="non-empty array"):
        asyncio.run(orchestrator.resolve_batch(batch))
    assert memory_store.get_calls == []
    assert renderer.calls == []


def test_batch_deadline_omits_stragglers_but_they_still_cache():
    store = InMemoryStore()
    pages = {}
    pages.update(pages_for("slow", profile_html(private=True)))
    slow_renderer = ScriptedRenderer(pages, delay=0.2)
    orchestrator = _orchestrator(store, slow_renderer, batch_deadline_sec=0.02)

    async def run():
        result = await orchestrator.resolve_batch(["slow"])
        assert orchestrator.straggler_count == 1
        await asyncio.sleep(0.4)
        return result

    result = asyncio.run(run())
    assert result.profiles == {}
    assert result.lobby_risk == 100
    assert orchestrator.straggler_count == 0
    assert store.payload("slow")["riskScore"] == 99.9


def test_out_of_range_cached_score_refetched(memory_store, renderer, orchestrator):
    """A corrupt cached score is a miss: the identity is fetched, not aggregated."""
    memory_store.data["a"] = ('{"riskScore": 1e6}', float("inf"))
    renderer.pages.update(pages_for("a", profile_html(private=True)))
    result = asyncio.run(orchestrator.resolve_batch(["a"]))
    assert result.profiles == {"a": 99.9}
    assert result.lobby_risk == pytest.approx(99.9, abs=0.01)


def test_identities_used_exactly_as_given(memory_store, renderer, orchestrator):
    memory_store.seed("abc ", 10.0)
    result = asyncio.run(orchestrator.resolve_batch(["abc "]))
    assert result.profiles == {"abc ": 10.0}
    assert memory_store.get_calls == ["abc "]
    assert renderer.calls == []
