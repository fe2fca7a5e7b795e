"""MongoDB store implementations."""

from .account_store import MongoAccountStore
from .base import MongoBaseRepository
from .offering_store import MongoOfferingStore
from .order_repository import MongoOrderRepository

__all__ = [
    "MongoAccountStore",
    "MongoBaseRepository",
    "MongoOfferingStore",
    "MongoOrderRepository",
]
