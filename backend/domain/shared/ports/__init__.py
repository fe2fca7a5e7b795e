"""Shared domain ports (interfaces for infrastructure adapters)."""

from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.idempotency_cache import IIdempotencyCache

__all__ = [
    "IEventBus",
    "IIdempotencyCache",
]
