"""Order repository port (interface)."""

from typing import List, Optional, Protocol
from uuid import UUID

from domain.order.core.entities.order import Order


class IOrderRepository(Protocol):
    """
    Interface for order persistence operations.

    Implementations return detached copies: mutating a loaded Order has
    no effect until it is saved again.

    Saves are conditional on Order.version: a copy only saves over the
    revision it was loaded from, so of two writers holding the same
    revision exactly one wins.
    """

    async def save(self, order: Order) -> None:
        """
        Save or update an order together with its lines.

        On success order.version is advanced to the stored revision.

        Raises:
            OrderingError: CONFLICT if the stored revision is not order.version

        Example:
            >>> await repository.save(order)
        """
        ...

    async def get_by_id(self, order_id: UUID) -> Optional[Order]:
        """
        Retrieve an order by ID.

        Returns:
            Order if found, None otherwise

        Raises:
            ValueError: If the stored order violates its invariants
        """
        ...

    async def get_by_account(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Order]:
        """
        Orders of one account, newest first (by ordered_at).

        Args:
            account_id: Owning account
            limit: Maximum number of orders (default 20)
            offset: Number of orders to skip (pagination)
        """
        ...

    async def exists(self, order_id: UUID) -> bool:
        ...
