"""In-memory order repository implementation.

Provides an in-memory implementation of IOrderRepository port for tests
and local development.
"""

from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError


class InMemoryOrderRepository:
    """
    In-memory implementation of IOrderRepository port.

    Orders are stored and returned as deep copies, so callers only see
    changes they explicitly save. Pending domain events are never stored.

    Example:
        >>> repository = InMemoryOrderRepository()
        >>> await repository.save(order)
        >>> loaded = await repository.get_by_id(order.id)
    """

    def __init__(self) -> None:
        self._storage: Dict[UUID, Order] = {}

    async def save(self, order: Order) -> None:
        """
        Save or update an order.

        Raises:
            OrderingError: CONFLICT if the order was saved meanwhile
                from another copy

        Note:
            Updates order.updated_at to current UTC time
        """
        current = self._storage.get(order.id)
        current_version = current.version if current is not None else 0
        if order.version != current_version:
            raise OrderingError.conflict(order.id, order.version)

        order.updated_at = datetime.now(timezone.utc)
        order.version = current_version + 1

        stored = deepcopy(order)
        stored.collect_events()
        self._storage[order.id] = stored

    async def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """
        Raises:
            ValueError: If the stored order violates its invariants
        """
        order = self._storage.get(order_id)
        if order is None:
            return None

        loaded = deepcopy(order)
        loaded.validate_invariants()
        return loaded

    async def get_by_account(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Order]:
        """Orders of an account ordered by ordered_at descending (newest first)."""
        orders = [o for o in self._storage.values() if o.account_id == account_id]
        orders.sort(key=lambda o: o.ordered_at, reverse=True)

        page = [deepcopy(o) for o in orders[offset:offset + limit]]
        for order in page:
            order.validate_invariants()
        return page

    async def exists(self, order_id: UUID) -> bool:
        return order_id in self._storage

    def clear(self) -> None:
        """Clear all orders (for testing)."""
        self._storage.clear()

    def count(self) -> int:
        return len(self._storage)
