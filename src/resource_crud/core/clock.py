"""
Monotonic UTC timestamps for record bookkeeping.

`datetime.now()` can return the same value twice (coarse clocks) or step
backwards (NTP adjustments). Records need `created_at <= updated_at` and a
strictly increasing `updated_at`, so timestamps are drawn from a clock that
never hands out a value less than or equal to the previous one.
"""
import threading
from datetime import datetime, timedelta, timezone

TICK = timedelta(microseconds=1)


class UtcClock:
    def __init__(self):
        self._lock = threading.Lock()
        self._last: datetime | None = None

    @staticmethod
    def wall() -> datetime:
        return datetime.now(timezone.utc)

    def now(self, *, after: datetime | None = None) -> datetime:
        """
        Return a UTC timestamp strictly later than every previous call,
        and strictly later than `after` when it is given.
        """
        with self._lock:
            candidate = self.wall()
            floors = [ts for ts in (self._last, after) if ts is not None]
            for floor in floors:
                if candidate <= floor:
                    candidate = floor + TICK
            self._last = candidate
            return candidate


# shared by every repository in the process
default_clock = UtcClock()
