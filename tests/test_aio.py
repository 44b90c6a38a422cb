import asyncio
import ipaddress

import pytest

from addrcache.cache.aio import AsyncAddressCache
from addrcache.cache.clock import ManualClock
from addrcache.common.errors import InvalidConfigError

LOCAL_1 = ipaddress.ip_address("127.0.0.1")
LOCAL_2 = ipaddress.ip_address("127.0.0.2")


@pytest.mark.asyncio
async def test_async_fifo_and_expiry():
    clock = ManualClock()
    cache = AsyncAddressCache(0.1, clock=clock)

    assert await cache.add(LOCAL_1)
    assert await cache.peek() == LOCAL_1
    clock.advance(0.15)
    assert await cache.add(LOCAL_2)

    assert await cache.take() == LOCAL_2
    assert (await cache.stats()).expired == 1


@pytest.mark.asyncio
async def test_async_take_waits_for_add():
    cache = AsyncAddressCache(10, clock=ManualClock())
    task = asyncio.create_task(cache.take())
    await asyncio.sleep(0.01)
    assert not task.done()

    await cache.add(LOCAL_1)

    assert await asyncio.wait_for(task, 1) == LOCAL_1


@pytest.mark.asyncio
async def test_async_cancelled_take_consumes_nothing():
    cache = AsyncAddressCache(10, clock=ManualClock())
    task = asyncio.create_task(cache.take())
    await asyncio.sleep(0.01)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await cache.add(LOCAL_1)
    assert await cache.take(timeout=0.1) == LOCAL_1


@pytest.mark.asyncio
async def test_async_take_timeout_returns_none():
    cache = AsyncAddressCache(10, clock=ManualClock())

    assert await cache.take(timeout=0.02) is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_async_close_wakes_waiters():
    cache = AsyncAddressCache(10, clock=ManualClock())
    tasks = [asyncio.create_task(cache.take()) for _ in range(2)]
    await asyncio.sleep(0.01)

    await cache.close()

    assert await asyncio.gather(*tasks) == [None, None]
    assert await cache.add(LOCAL_1) is False


@pytest.mark.asyncio
async def test_async_remove_and_duplicates():
    async with AsyncAddressCache(10, capacity=2, clock=ManualClock()) as cache:
        assert await cache.add(LOCAL_1)
        assert await cache.add(LOCAL_1) is False
        assert await cache.contains(LOCAL_1)
        assert await cache.remove(LOCAL_1)
        assert await cache.remove(LOCAL_1) is False
        assert await cache.remove(None) is False
        assert await cache.peek() is None
    assert cache.closed


def test_async_invalid_config():
    with pytest.raises(InvalidConfigError):
        AsyncAddressCache(0)


def test_async_cache_built_outside_running_loop():
    cache = AsyncAddressCache(10, clock=ManualClock())

    async def scenario():
        task = asyncio.create_task(cache.take(timeout=1))
        await asyncio.sleep(0.01)
        await cache.add(LOCAL_2)
        return await task

    assert asyncio.run(scenario()) == LOCAL_2
    assert len(cache) == 0
