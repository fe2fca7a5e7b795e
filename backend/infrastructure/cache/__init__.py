"""Cache implementations."""

from infrastructure.cache.in_memory_idempotency_cache import (
    InMemoryIdempotencyCache,
)

__all__ = [
    "InMemoryIdempotencyCache",
]
