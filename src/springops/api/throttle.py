"""Short-lived cache for frequently polled GET endpoints.

Identical GETs issued while one is already in flight share that request, and
successful responses are reused for ``ttl_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from springops.api.results import ApiResult

logger = logging.getLogger(__name__)


class ThrottledGetCache:
    def __init__(self, *, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, tuple[float, ApiResult]] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self.hits = 0
        self.misses = 0

    def _fresh(self, key: str) -> ApiResult | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, result = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return result

    async def get(self, key: str, loader: Callable[[], Awaitable[ApiResult]], *, force: bool = False) -> ApiResult:
        if not force:
            cached = self._fresh(key)
            if cached is not None:
                self.hits += 1
                return cached

        task = self._inflight.get(key)
        if task is None:
            self.misses += 1
            task = asyncio.ensure_future(loader())
            self._inflight[key] = task
            try:
                result = await task
            finally:
                self._inflight.pop(key, None)
            if result.ok:
                self._entries[key] = (self._clock(), result)
            return result

        logger.debug("Joining in-flight request for %s", key)
        return await task

    def invalidate(self, prefix: str | None = None) -> None:
        if prefix is None:
            self._entries.clear()
            return
        for key in [k for k in self._entries if k.startswith(prefix)]:
            self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict:
        return {"entries": len(self._entries), "inflight": len(self._inflight), "hits": self.hits, "misses": self.misses}
