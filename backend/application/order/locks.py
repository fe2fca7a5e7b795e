"""Per-order asyncio locks.

Order transitions are read-modify-write cycles on the repository; every
command that changes an order's status runs under that order's lock.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID


class OrderLockRegistry:
    """
    Hands out one asyncio.Lock per order ID.

    Example:
        >>> async with locks.hold(order_id):
        ...     order = await repository.get_by_id(order_id)
        ...     order.select_payment_method(PaymentMethod.COD)
        ...     await repository.save(order)
    """

    def __init__(self) -> None:
        self._locks: Dict[UUID, asyncio.Lock] = {}

    def lock_for(self, order_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(order_id)
        if lock is None:
            lock = self._locks[order_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, order_id: UUID) -> AsyncIterator[None]:
        async with self.lock_for(order_id):
            yield

    def __len__(self) -> int:
        return len(self._locks)
