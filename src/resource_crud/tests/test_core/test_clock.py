from datetime import datetime, timedelta, timezone

from resource_crud.core.clock import TICK, UtcClock

FIXED = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock(UtcClock):
    @staticmethod
    def wall() -> datetime:
        return FIXED


def test_now_is_timezone_aware_utc():
    ts = UtcClock().now()

    assert ts.tzinfo is not None
    assert ts.utcoffset() == timedelta(0)


def test_now_strictly_increases_when_wall_clock_stalls():
    clock = FrozenClock()

    stamps = [clock.now() for _ in range(5)]

    assert stamps[0] == FIXED
    assert all(later - earlier == TICK for earlier, later in zip(stamps, stamps[1:]))


def test_now_respects_after_floor():
    clock = FrozenClock()
    future = FIXED + timedelta(hours=1)

    assert clock.now(after=future) == future + TICK
    # the floor also raises the clock's own high-water mark
    assert clock.now() == future + 2 * TICK
