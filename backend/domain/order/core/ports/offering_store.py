"""Offering store port (interface).

The menu catalog's quantity surface: offerings are looked up directly by
id and their stock is changed only through atomic primitives.
"""

from typing import List, Optional, Protocol
from uuid import UUID

from domain.order.core.entities.menu_offering import MenuOffering


class IOfferingStore(Protocol):
    """
    Interface for menu offering persistence and stock mutation.

    Implementations:
    - In-memory store with a per-offering asyncio.Lock (tests, dev)
    - MongoDB store with conditional find_one_and_update (production)

    Example usage (domain layer):
        >>> offering = await store.try_decrement(offering_id, 3)
        >>> if offering is None:
        ...     # unknown offering or not enough stock
        ...     current = await store.get(offering_id)
    """

    async def get(self, offering_id: UUID) -> Optional[MenuOffering]:
        """Return the offering, or None if it does not exist."""
        ...

    async def save(self, offering: MenuOffering) -> None:
        """Create or replace an offering (menu publishing)."""
        ...

    async def list_by_menu(self, menu_id: UUID) -> List[MenuOffering]:
        """All offerings of one published menu, ordered by recipe name."""
        ...

    async def try_decrement(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        """
        Atomically take quantity units if at least that many are available.

        Returns:
            The offering after the decrement, or None when the offering is
            missing or its available quantity is below quantity. In the
            latter case nothing is changed.
        """
        ...

    async def increment(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        """
        Atomically add quantity units back.

        Returns:
            The offering after the increment, or None if it does not exist
        """
        ...
