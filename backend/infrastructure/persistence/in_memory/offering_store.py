"""In-memory menu offering store.

Implements IOfferingStore with a dictionary and one asyncio.Lock per
offering, so a check-and-decrement never interleaves with another
reservation on the same offering.
"""

import asyncio
from copy import deepcopy
from typing import Dict, List, Optional
from uuid import UUID

from domain.order.core.entities.menu_offering import MenuOffering


class InMemoryOfferingStore:
    """
    In-memory implementation of IOfferingStore port.

    Persistence: Data lost on process restart (in-memory only)
    Concurrency: Safe for concurrent coroutines on one event loop

    Example:
        >>> store = InMemoryOfferingStore()
        >>> await store.save(MenuOffering.publish(..., quantity=10))
        >>> await store.try_decrement(offering.id, 3)
    """

    def __init__(self) -> None:
        self._storage: Dict[UUID, MenuOffering] = {}
        self._locks: Dict[UUID, asyncio.Lock] = {}

    def _lock_for(self, offering_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(offering_id)
        if lock is None:
            lock = self._locks[offering_id] = asyncio.Lock()
        return lock

    async def get(self, offering_id: UUID) -> Optional[MenuOffering]:
        offering = self._storage.get(offering_id)
        return deepcopy(offering) if offering is not None else None

    async def save(self, offering: MenuOffering) -> None:
        """Store a deep copy; later changes to the argument are not seen."""
        async with self._lock_for(offering.id):
            self._storage[offering.id] = deepcopy(offering)

    async def list_by_menu(self, menu_id: UUID) -> List[MenuOffering]:
        offerings = [o for o in self._storage.values() if o.menu_id == menu_id]
        offerings.sort(key=lambda o: o.recipe_name)
        return [deepcopy(o) for o in offerings]

    async def try_decrement(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        async with self._lock_for(offering_id):
            offering = self._storage.get(offering_id)
            if offering is None or not offering.can_reserve(quantity):
                return None
            offering.reserve(quantity)
            return deepcopy(offering)

    async def increment(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        async with self._lock_for(offering_id):
            offering = self._storage.get(offering_id)
            if offering is None:
                return None
            offering.release(quantity)
            return deepcopy(offering)

    def clear(self) -> None:
        """Clear all offerings (for testing)."""
        self._storage.clear()
        self._locks.clear()

    def count(self) -> int:
        return len(self._storage)
