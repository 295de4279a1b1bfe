import asyncio

from springops.api.results import ApiResult, ErrorKind
from springops.api.throttle import ThrottledGetCache


class Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _counting_loader(results):
    calls = []

    async def loader():
        calls.append(1)
        await asyncio.sleep(0)
        return results[min(len(calls), len(results)) - 1]

    return loader, calls


def test_fresh_entries_are_reused_until_ttl():
    clock = Clock()
    cache = ThrottledGetCache(ttl_seconds=30, clock=clock)
    loader, calls = _counting_loader([ApiResult.success({"n": 1}), ApiResult.success({"n": 2})])

    assert asyncio.run(cache.get("k", loader)).data == {"n": 1}
    clock.now += 29
    assert asyncio.run(cache.get("k", loader)).data == {"n": 1}
    clock.now += 1
    assert asyncio.run(cache.get("k", loader)).data == {"n": 2}
    assert len(calls) == 2
    assert cache.stats()["hits"] == 1


def test_concurrent_identical_gets_share_one_request():
    cache = ThrottledGetCache()
    loader, calls = _counting_loader([ApiResult.success([1])])

    async def run():
        return await asyncio.gather(*(cache.get("k", loader) for _ in range(5)))

    results = asyncio.run(run())
    assert len(calls) == 1
    assert all(r.data == [1] for r in results)


def test_failures_are_not_cached():
    cache = ThrottledGetCache()
    loader, calls = _counting_loader(
        [ApiResult.failure(ErrorKind.RATE_LIMITED, "slow down", status=429), ApiResult.success("ok")]
    )
    assert not asyncio.run(cache.get("k", loader)).ok
    assert asyncio.run(cache.get("k", loader)).data == "ok"
    assert len(calls) == 2


def test_force_and_invalidate_bypass_cache():
    cache = ThrottledGetCache()
    loader, calls = _counting_loader([ApiResult.success("a"), ApiResult.success("b"), ApiResult.success("c")])
    asyncio.run(cache.get("tok:/notifications/", loader))
    assert asyncio.run(cache.get("tok:/notifications/", loader, force=True)).data == "b"
    cache.invalidate("tok:/notif")
    assert asyncio.run(cache.get("tok:/notifications/", loader)).data == "c"
