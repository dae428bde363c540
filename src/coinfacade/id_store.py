"""Pool of exchange-issued order ids with single-flight refill."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

FetchIds = Callable[[str], Awaitable[tuple[str, list[str]]]]

ID_TTL_SECONDS = 5 * 60


class GlobalIdStore:
    """Serves ids from a batch fetched from the exchange.

    The batch is replaced when it runs dry or when it is older than `ttl`
    seconds. Refill and pop happen under one lock, so concurrent callers share
    a single in-flight refill and never receive the same id.

    Usage:
        store = await GlobalIdStore.create(fetch)
        order_id = await store.next_id()
    """

    def __init__(
        self,
        fetch: FetchIds,
        *,
        ttl: float = ID_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fetch = fetch
        self._ttl = ttl
        self._clock = clock
        self._lock = asyncio.Lock()
        self._remark = "0"
        self._ids: list[str] = []
        self._fetched_at: float | None = None

    @classmethod
    async def create(
        cls,
        fetch: FetchIds,
        *,
        ttl: float = ID_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> "GlobalIdStore":
        store = cls(fetch, ttl=ttl, clock=clock)
        async with store._lock:
            await store._refill()
        return store

    @property
    def remaining(self) -> int:
        return len(self._ids)

    async def _refill(self) -> None:
        remark, ids = await self._fetch(self._remark)
        logger.info("Fetched %d global ids (remark %s -> %s)", len(ids), self._remark, remark)
        self._remark = remark
        self._ids = list(ids)
        self._fetched_at = self._clock()

    def _needs_refill(self) -> bool:
        if not self._ids or self._fetched_at is None:
            return True
        return self._clock() - self._fetched_at >= self._ttl

    async def next_id(self) -> str:
        async with self._lock:
            if self._needs_refill():
                await self._refill()
            if not self._ids:
                raise RuntimeError("Exchange returned an empty id batch")
            return self._ids.pop()
