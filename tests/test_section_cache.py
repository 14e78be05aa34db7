import asyncio

import pytest

from travel_explorer.models import GuideSectionRef
from travel_explorer.services.section_cache import GuideSectionCache


class CountingFetcher:
    def __init__(self, bodies=None, delay=0.01):
        self.bodies = bodies or {}
        self.delay = delay
        self.calls = []

    async def __call__(self, title, section_id):
        self.calls.append((title, section_id))
        await asyncio.sleep(self.delay)
        return self.bodies.get(section_id)


def _sanitize(raw, title):
    return f"[{title}]{raw}"


@pytest.mark.asyncio
async def test_concurrent_gets_share_one_fetch():
    fetch = CountingFetcher({3: "<p>See</p>"})
    cache = GuideSectionCache(fetch, _sanitize)

    results = await asyncio.gather(*(cache.get("Paris", 3) for _ in range(8)))

    assert fetch.calls == [("Paris", 3)]
    assert set(results) == {"[Paris]<p>See</p>"}
    assert ("Paris", 3) in cache


@pytest.mark.asyncio
async def test_cached_entry_served_without_fetch():
    fetch = CountingFetcher({3: "<p>See</p>"})
    cache = GuideSectionCache(fetch, _sanitize)
    first = await cache.get("Paris", 3)
    second = await cache.get("Paris", 3)
    assert first == second
    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_keys_are_per_title():
    fetch = CountingFetcher({3: "<p>x</p>"})
    cache = GuideSectionCache(fetch, _sanitize)
    await cache.get("Paris", 3)
    await cache.get("Rome", 3)
    assert len(fetch.calls) == 2
    assert cache.peek("Rome", 3) == "[Rome]<p>x</p>"


@pytest.mark.asyncio
async def test_failure_cached_by_default():
    fetch = CountingFetcher({})
    cache = GuideSectionCache(fetch, _sanitize)

    assert await cache.get("Paris", 9) == "Section unavailable."
    assert await cache.get("Paris", 9) == "Section unavailable."
    assert len(fetch.calls) == 1


@pytest.mark.asyncio
async def test_failure_not_cached_when_disabled():
    fetch = CountingFetcher({})
    cache = GuideSectionCache(fetch, _sanitize, cache_failures=False, unavailable_text="n/a")

    assert await cache.get("Paris", 9) == "n/a"
    assert ("Paris", 9) not in cache
    fetch.bodies[9] = "<p>back</p>"
    assert await cache.get("Paris", 9) == "[Paris]<p>back</p>"
    assert len(fetch.calls) == 2


@pytest.mark.asyncio
async def test_cancelled_caller_still_populates_cache():
    gate = asyncio.Event()

    async def fetch(title, section_id):
        await gate.wait()
        return "<p>late</p>"

    cache = GuideSectionCache(fetch, _sanitize)
    waiter = asyncio.ensure_future(cache.get("Paris", 4))
    await asyncio.sleep(0.01)
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    gate.set()
    for _ in range(10):
        await asyncio.sleep(0.01)
        if ("Paris", 4) in cache:
            break

    assert cache.peek("Paris", 4) == "[Paris]<p>late</p>"


@pytest.mark.asyncio
async def test_prefetch_returns_every_ref_in_order():
    fetch = CountingFetcher({4: "<p>see</p>", 6: "<p>eat</p>"})
    cache = GuideSectionCache(fetch, _sanitize)
    refs = [GuideSectionRef("See", 4), GuideSectionRef("Eat", 6), GuideSectionRef("Do", 5)]

    sections = await cache.prefetch("Paris", refs)

    assert list(sections) == [4, 6, 5]
    assert sections[4] == "[Paris]<p>see</p>"
    assert sections[5] == "Section unavailable."
    assert len(cache) == 3


@pytest.mark.asyncio
async def test_prefetch_is_concurrent():
    fetch = CountingFetcher({i: "<p/>" for i in range(6)}, delay=0.05)
    cache = GuideSectionCache(fetch, _sanitize)
    refs = [GuideSectionRef(str(i), i) for i in range(6)]

    loop = asyncio.get_running_loop()
    started = loop.time()
    await cache.prefetch("Paris", refs)

    assert loop.time() - started < 0.25
