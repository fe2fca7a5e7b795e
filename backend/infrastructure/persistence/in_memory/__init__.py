"""In-memory persistence implementations."""

from infrastructure.persistence.in_memory.account_store import InMemoryAccountStore
from infrastructure.persistence.in_memory.offering_store import InMemoryOfferingStore
from infrastructure.persistence.in_memory.order_repository import InMemoryOrderRepository

__all__ = [
    "InMemoryAccountStore",
    "InMemoryOfferingStore",
    "InMemoryOrderRepository",
]
