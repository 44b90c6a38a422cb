import pytest

from addrcache.cache.cache import AddressCache
from addrcache.cache.clock import ManualClock


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache(clock):
    return AddressCache(0.1, clock=clock)
