"""
In-process mutual exclusion per product.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator
import asyncio
import weakref


class ProductLockRegistry:
    """
    Hands out one asyncio.Lock per product id.

    Locks are held weakly, so a product's lock disappears once no
    coroutine is holding or waiting on it.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def get(self, product_id: int) -> asyncio.Lock:
        lock = self._locks.get(product_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[product_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, product_id: int) -> AsyncIterator[None]:
        lock = self.get(product_id)
        async with lock:
            yield


# Shared by every request handled in this process
product_locks = ProductLockRegistry()
