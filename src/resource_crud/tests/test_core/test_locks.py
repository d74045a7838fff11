import asyncio
import threading

from resource_crud.core.locks import KeyedLock


async def test_same_key_serializes():
    locks = KeyedLock()
    active = 0
    peak = 0

    async def worker():
        nonlocal active, peak
        async with locks.hold("a"):
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(worker() for _ in range(5)))

    assert peak == 1


async def test_different_keys_run_in_parallel():
    locks = KeyedLock()
    inside = asyncio.Event()
    release = asyncio.Event()

    async def holder():
        async with locks.hold("a"):
            inside.set()
            await release.wait()

    task = asyncio.create_task(holder())
    await inside.wait()

    # "b" must not wait for "a"
    async with locks.hold("b"):
        pass

    release.set()
    await task


async def test_locks_are_released_after_use():
    locks = KeyedLock()

    async with locks.hold("a"):
        assert len(locks) == 1

    assert len(locks) == 0


def test_event_loops_in_different_threads_do_not_share_locks():
    locks = KeyedLock()
    first_inside = threading.Event()
    second_done = threading.Event()
    errors = []

    async def first():
        async with locks.hold("a"):
            first_inside.set()
            # keep "a" held on this loop until the other loop got through
            await asyncio.to_thread(second_done.wait, 5)

    async def second():
        async with locks.hold("a"):
            pass
        second_done.set()

    def run(coro_fn, wait_for=None):
        try:
            if wait_for is not None:
                wait_for.wait(5)
            asyncio.run(coro_fn())
        except Exception as exc:  # surfaced through `errors`
            errors.append(exc)

    threads = [
        threading.Thread(target=run, args=(first,)),
        threading.Thread(target=run, args=(second, first_inside)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)

    assert errors == []
    assert second_done.is_set()
    assert len(locks) == 0


def test_contended_key_across_threads_raises_nothing():
    locks = KeyedLock()
    start = threading.Barrier(4)
    errors = []

    async def worker():
        for _ in range(20):
            async with locks.hold("a"):
                await asyncio.sleep(0)

    def run():
        try:
            start.wait(5)
            asyncio.run(worker())
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=run) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)

    assert errors == []
    assert len(locks) == 0
