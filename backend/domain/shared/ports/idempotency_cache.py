"""
Idempotency cache port.

Records which external notifications (gateway callbacks) have already
been applied, keyed by a caller-built key such as
``gateway-callback:<order id>:<transaction id>``, so that a replay is a no-op.
"""

from typing import Optional, Protocol
from uuid import UUID


class IIdempotencyCache(Protocol):
    """Port for idempotency cache implementation.

    Implementations should provide TTL support to prevent infinite cache growth.
    """

    async def get(self, key: str) -> Optional[UUID]:
        """Get the order ID recorded for an idempotency key.

        Returns:
            The cached order ID if found and not expired, None otherwise
        """
        ...

    async def set(self, key: str, order_id: UUID, ttl_seconds: int = 3600) -> None:
        """Record the order ID an idempotency key was applied to.

        Args:
            key: The idempotency key
            order_id: The order the notification was applied to
            ttl_seconds: Time-to-live in seconds (default: 1 hour)
        """
        ...

    async def exists(self, key: str) -> bool:
        ...

    async def delete(self, key: str) -> None:
        ...
