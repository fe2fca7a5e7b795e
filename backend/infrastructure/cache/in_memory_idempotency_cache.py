"""
In-memory idempotency cache implementation.

Remembers which gateway transactions have already been applied to which
order. Single-process only; entries vanish on restart, so orders also
keep the transaction id they were settled with.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, NamedTuple, Optional
from uuid import UUID

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    order_id: UUID
    expires_at: datetime


class InMemoryIdempotencyCache:
    """In-memory implementation of IIdempotencyCache with per-key TTL."""

    def __init__(self, default_ttl_seconds: int = 3600) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._default_ttl_seconds = default_ttl_seconds

    async def get(self, key: str) -> Optional[UUID]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Idempotency cache miss", extra={"key": key})
            return None

        if datetime.now(timezone.utc) > entry.expires_at:
            logger.debug("Idempotency entry expired", extra={"key": key})
            del self._entries[key]
            return None

        logger.debug(
            "Idempotency cache hit",
            extra={"key": key, "order_id": str(entry.order_id)},
        )
        return entry.order_id

    async def set(self, key: str, order_id: UUID, ttl_seconds: Optional[int] = None) -> None:
        """Record order_id for key, expiring after ttl_seconds (or the default)."""
        ttl = self._default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = _Entry(
            order_id=order_id,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=ttl),
        )
        logger.debug(
            "Idempotency key recorded",
            extra={"key": key, "order_id": str(order_id), "ttl_seconds": ttl},
        )

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all entries (for testing)."""
        self._entries.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed
        """
        now = datetime.now(timezone.utc)
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Expired idempotency entries removed", extra={"count": len(expired)})
        return len(expired)
