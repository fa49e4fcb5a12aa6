import asyncio
from contextlib import asynccontextmanager


class KeyedLocks:
    """
    One asyncio.Lock per person id, always taken in ascending id order.
    A lock only lives while some task holds or waits for it.
    """

    def __init__(self):
        self._locks: dict[int, asyncio.Lock] = {}
        self._interest: dict[int, int] = {}

    def lock_for(self, key: int) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _forget(self, key: int) -> None:
        remaining = self._interest.get(key, 0) - 1
        if remaining > 0:
            self._interest[key] = remaining
            return
        self._interest.pop(key, None)
        self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, *keys: int):
        ordered = sorted(set(keys))
        for key in ordered:
            self._interest[key] = self._interest.get(key, 0) + 1
        acquired = []
        try:
            for key in ordered:
                lock = self.lock_for(key)
                await lock.acquire()
                acquired.append(lock)
            yield ordered
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._forget(key)
