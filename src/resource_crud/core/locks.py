import asyncio
import threading
import weakref
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Hashable


@dataclass
class _Slot:
    lock: asyncio.Lock
    holders: int = 0


class KeyedLock:
    """
    One asyncio.Lock per key, created on demand and dropped when no task holds
    or waits for it. Operations on the same key serialize; different keys never contend.

    asyncio locks belong to a single event loop, so slots are kept per running
    loop. Tasks on different loops (e.g. one `asyncio.run` per worker thread)
    never share a lock; serializing across loops is left to the database
    (row locks / write lock).
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._slots: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[Hashable, _Slot]] = (
            weakref.WeakKeyDictionary()
        )

    def _acquire_slot(self, loop: asyncio.AbstractEventLoop, key: Hashable) -> _Slot:
        with self._guard:
            slots = self._slots.get(loop)
            if slots is None:
                slots = self._slots[loop] = {}
            slot = slots.get(key)
            if slot is None:
                slot = slots[key] = _Slot(asyncio.Lock())
            slot.holders += 1
            return slot

    def _release_slot(self, loop: asyncio.AbstractEventLoop, key: Hashable) -> None:
        with self._guard:
            slots = self._slots.get(loop)
            if slots is None:
                return
            slot = slots.get(key)
            if slot is None:
                return
            slot.holders -= 1
            if slot.holders == 0:
                del slots[key]
                if not slots:
                    del self._slots[loop]

    @asynccontextmanager
    async def hold(self, key: Hashable):
        loop = asyncio.get_running_loop()
        slot = self._acquire_slot(loop, key)
        try:
            async with slot.lock:
                yield
        finally:
            self._release_slot(loop, key)

    def __len__(self) -> int:
        with self._guard:
            return sum(len(slots) for slots in self._slots.values())
