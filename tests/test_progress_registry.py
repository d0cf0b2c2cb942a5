# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: test_progress_registry.py
# -----------------------------------------------------------------------------
import asyncio
import json

import pytest

from api.pipeline_errors import run_ingest_in_background
from corpus.SwapiCorpusLoader import SwapiCorpusLoader
from corpus.SwapiTextProjector import SwapiTextProjector
from services.ProgressRegistry import ProgressRegistry, no_progress
from services.SwapiIngestService import SwapiIngestService


def _payload(sse: str) -> dict:
    assert sse.startswith("data: ") and sse.endswith("\n\n")
    return json.loads(sse[len("data: "):])


def test_publish_to_unknown_session_is_a_no_op():
    registry = ProgressRegistry()
    assert registry.publish("nobody", "start", "hello") is False


def test_register_publish_and_unregister():
    registry = ProgressRegistry()
    q = registry.register("s1")

    assert registry.register("s1") is q
    assert registry.publish("s1", "embedding", "1/3", {"current": 1}) is True

    event = q.get_nowait()
    assert event.type == "embedding"
    assert _payload(event.to_sse())["data"] == {"current": 1}

    registry.unregister("s1")
    assert registry.open_sessions() == []


def test_callback_for_session():
    registry = ProgressRegistry()
    q = registry.register("s1")

    assert registry.callback_for(None) is no_progress
    registry.callback_for("s1")("start", "go", {"index_name": "x"})

    assert q.get_nowait().message == "go"


def test_close_all_ends_streams_and_rejects_new_sessions():
    registry = ProgressRegistry()
    q = registry.register("s1")

    registry.close_all()

    assert q.get_nowait() is None
    assert registry.open_sessions() == []
    with pytest.raises(RuntimeError):
        registry.register("s2")


def test_stream_stops_on_terminal_event():
    registry = ProgressRegistry()
    registry.register("s1")
    registry.publish("s1", "start", "Loading")
    registry.publish("s1", "complete", "Done", {"ingested": 3})
    registry.publish("s1", "late", "never delivered")

    async def collect():
        return [chunk async for chunk in registry.stream("s1")]

    chunks = asyncio.run(collect())

    assert chunks[0] == ": connected\n\n"
    assert [_payload(c)["type"] for c in chunks[1:]] == ["start", "complete"]
    assert "s1" not in registry.open_sessions()


def test_stream_stops_when_registry_closes():
    registry = ProgressRegistry()

    async def run():
        stream = registry.stream("s1")
        first = await stream.__anext__()
        registry.publish("s1", "start", "Loading")
        second = await stream.__anext__()
        registry.close_all()
        with pytest.raises(StopAsyncIteration):
            await stream.__anext__()
        return first, second

    first, second = asyncio.run(run())

    assert first == ": connected\n\n"
    assert _payload(second)["type"] == "start"


def test_stream_sends_keep_alive_while_idle():
    registry = ProgressRegistry(heartbeat_seconds=0.01)

    async def run():
        stream = registry.stream("s1")
        await stream.__anext__()
        keep_alive = await stream.__anext__()
        registry.publish("s1", "error", "boom")
        rest = [chunk async for chunk in stream]
        return keep_alive, rest

    keep_alive, rest = asyncio.run(run())

    assert keep_alive == ": keep-alive\n\n"
    assert _payload(rest[-1])["type"] == "error"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_unclaimed_session_is_dropped_after_terminal_event():
    clock = FakeClock()
    registry = ProgressRegistry(detached_ttl_seconds=60, clock=clock)
    q = registry.register("never-connects")
    registry.publish("never-connects", "start", "Loading")
    registry.publish("never-connects", "complete", "Done")

    clock.now += 59
    assert registry.prune_expired() == []
    assert q.qsize() == 2

    clock.now += 1
    assert registry.prune_expired() == ["never-connects"]
    assert registry.open_sessions() == []


def test_unfinished_unclaimed_session_is_kept():
    clock = FakeClock()
    registry = ProgressRegistry(detached_ttl_seconds=60, clock=clock)
    registry.register("s1")
    registry.publish("s1", "embedding", "1/3")

    clock.now += 3600

    assert registry.prune_expired() == []
    assert registry.open_sessions() == ["s1"]


def test_expired_sessions_are_swept_on_register():
    clock = FakeClock()
    registry = ProgressRegistry(detached_ttl_seconds=60, clock=clock)
    registry.register("old")
    registry.publish("old", "error", "boom")

    clock.now += 120
    registry.register("new")

    assert registry.open_sessions() == ["new"]


def test_attached_stream_is_not_pruned():
    clock = FakeClock()
    registry = ProgressRegistry(detached_ttl_seconds=60, clock=clock)

    async def run():
        stream = registry.stream("s1")
        await stream.__anext__()
        registry.publish("s1", "complete", "Done")
        clock.now += 120
        pruned = registry.prune_expired()
        rest = [chunk async for chunk in stream]
        return pruned, rest

    pruned, rest = asyncio.run(run())

    assert pruned == []
    assert _payload(rest[-1])["type"] == "complete"
    assert registry.open_sessions() == []


def test_rebuild_for_session_that_never_connects_is_released(
    three_characters, write_corpus, fake_embedder, chroma_store, index_name
):
    clock = FakeClock()
    registry = ProgressRegistry(detached_ttl_seconds=60, clock=clock)
    svc = SwapiIngestService(
        corpus_loader=SwapiCorpusLoader(write_corpus(three_characters)),
        projector=SwapiTextProjector(),
        embedder=fake_embedder,
        store=chroma_store,
        index_name=index_name,
        throttle_seconds=0,
    )
    registry.register("never-connects")

    svc.rebuild_index(registry.callback_for("never-connects"))
    assert registry.open_sessions() == ["never-connects"]

    clock.now += 60
    registry.prune_expired()
    assert registry.open_sessions() == []


def test_rejected_background_rebuild_ends_the_stream(
    three_characters, write_corpus, fake_embedder, chroma_store, index_name
):
    registry = ProgressRegistry()
    svc = SwapiIngestService(
        corpus_loader=SwapiCorpusLoader(write_corpus(three_characters)),
        projector=SwapiTextProjector(),
        embedder=fake_embedder,
        store=chroma_store,
        index_name=index_name,
        throttle_seconds=0,
    )
    registry.register("s1")

    svc._lock.acquire()
    try:
        run_ingest_in_background(svc, registry.callback_for("s1"))
    finally:
        svc._lock.release()

    async def collect():
        return [chunk async for chunk in registry.stream("s1")]

    chunks = asyncio.run(collect())

    assert _payload(chunks[-1])["type"] == "error"
    assert _payload(chunks[-1])["data"] == {"error_type": "IngestInProgressError"}
    assert registry.open_sessions() == []
