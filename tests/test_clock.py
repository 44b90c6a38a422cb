import pytest

from addrcache.cache.clock import ManualClock, MonotonicClock


def test_manual_clock_advances_and_sets():
    clock = ManualClock(start=5.0)

    assert clock.now() == 5.0
    assert clock.advance(1.5) == 6.5
    clock.set(10.0)
    assert clock.now() == 10.0


def test_manual_clock_refuses_to_go_backwards():
    clock = ManualClock(start=5.0)

    with pytest.raises(ValueError):
        clock.advance(-1)
    with pytest.raises(ValueError):
        clock.set(4.0)


def test_monotonic_clock_never_decreases():
    clock = MonotonicClock()
    first = clock.now()

    assert clock.now() >= first
