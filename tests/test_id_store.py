"""Tests for the global order-id pool."""

import asyncio

import pytest

from coinfacade.id_store import GlobalIdStore


class BatchFetcher:
    """Hands out batches of unique ids and records each call's remark."""

    def __init__(self, size=100, delay=0.0):
        self.size = size
        self.delay = delay
        self.calls = []
        self.next_value = 0

    async def __call__(self, remark):
        self.calls.append(remark)
        await asyncio.sleep(self.delay)
        ids = [str(self.next_value + i) for i in range(self.size)]
        self.next_value += self.size
        return f"remark-{len(self.calls)}", ids


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestGlobalIdStore:
    """Tests for GlobalIdStore."""

    @pytest.mark.asyncio
    async def test_create_fetches_first_batch(self):
        fetch = BatchFetcher(size=3)
        store = await GlobalIdStore.create(fetch)

        assert fetch.calls == ["0"]
        assert store.remaining == 3
        assert await store.next_id() == "2"
        assert len(fetch.calls) == 1

    @pytest.mark.asyncio
    async def test_refills_when_empty_with_last_remark(self):
        fetch = BatchFetcher(size=2)
        store = await GlobalIdStore.create(fetch)

        ids = [await store.next_id() for _ in range(5)]

        assert len(set(ids)) == 5
        assert fetch.calls == ["0", "remark-1", "remark-2"]

    @pytest.mark.asyncio
    async def test_refills_after_ttl(self):
        fetch = BatchFetcher(size=10)
        clock = FakeClock()
        store = await GlobalIdStore.create(fetch, ttl=300, clock=clock)

        await store.next_id()
        clock.now += 299
        await store.next_id()
        assert len(fetch.calls) == 1

        clock.now += 1
        await store.next_id()
        assert len(fetch.calls) == 2
        assert store.remaining == 9

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_refills(self):
        fetch = BatchFetcher(size=100, delay=0.01)
        store = await GlobalIdStore.create(fetch)

        ids = await asyncio.gather(*(store.next_id() for _ in range(250)))

        assert len(ids) == 250
        assert len(set(ids)) == 250
        assert len(fetch.calls) == 3

    @pytest.mark.asyncio
    async def test_empty_batch_raises(self):
        fetch = BatchFetcher(size=0)
        store = await GlobalIdStore.create(fetch)
        with pytest.raises(RuntimeError):
            await store.next_id()
