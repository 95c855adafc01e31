"""Tests for debounced search submission."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from animebing.client import SearchDebouncer


class Recorder:
    def __init__(self):
        self.queries: list[str] = []

    async def __call__(self, query: str) -> None:
        self.queries.append(query)


@pytest.mark.asyncio
async def test_rapid_typing_fires_once_with_final_value():
    callback = AsyncMock()
    debouncer = SearchDebouncer(callback, delay=0.05)

    debouncer.submit("narut")
    await asyncio.sleep(0.01)
    debouncer.submit("naruto")
    await debouncer.wait()

    callback.assert_awaited_once_with("naruto")
    assert debouncer.pending is None


@pytest.mark.asyncio
async def test_nothing_fires_before_the_delay():
    recorder = Recorder()
    debouncer = SearchDebouncer(recorder, delay=0.2)

    debouncer.submit("bleach")
    await asyncio.sleep(0.02)

    assert recorder.queries == []
    assert debouncer.pending == "bleach"
    debouncer.cancel()


@pytest.mark.asyncio
async def test_separate_pauses_fire_separately():
    recorder = Recorder()
    debouncer = SearchDebouncer(recorder, delay=0.02)

    debouncer.submit("one")
    await debouncer.wait()
    debouncer.submit("two")
    await debouncer.wait()

    assert recorder.queries == ["one", "two"]


@pytest.mark.asyncio
async def test_cancel_drops_pending_query():
    recorder = Recorder()
    debouncer = SearchDebouncer(recorder, delay=0.02)

    debouncer.submit("naruto")
    debouncer.cancel()
    await asyncio.sleep(0.05)

    assert recorder.queries == []
    assert debouncer.pending is None


@pytest.mark.asyncio
async def test_flush_runs_immediately():
    recorder = Recorder()
    debouncer = SearchDebouncer(recorder, delay=10.0)

    debouncer.submit("one piece")
    await debouncer.flush()

    assert recorder.queries == ["one piece"]
    await debouncer.flush()
    assert recorder.queries == ["one piece"]
