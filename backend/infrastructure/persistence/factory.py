"""Store factory for the persistence layer.

Environment-based adapter selection:
- REPOSITORY_BACKEND=mongodb: MongoDB stores sharing one motor client
- REPOSITORY_BACKEND=inmemory (default): in-memory stores

Usage:
    from infrastructure.persistence.factory import get_offering_store

    store = get_offering_store()  # Singleton instance
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient

from domain.order.core.ports.account_store import IAccountStore
from domain.order.core.ports.offering_store import IOfferingStore
from domain.order.core.ports.order_repository import IOrderRepository
from infrastructure.config import get_mongodb_uri, get_repository_backend
from infrastructure.persistence.in_memory.account_store import InMemoryAccountStore
from infrastructure.persistence.in_memory.offering_store import InMemoryOfferingStore
from infrastructure.persistence.in_memory.order_repository import InMemoryOrderRepository

_BACKENDS = ("inmemory", "mongodb")

_mongo_client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None


def _get_mongo_client() -> AsyncIOMotorClient[Dict[str, Any]]:
    global _mongo_client
    if _mongo_client is None:
        uri = get_mongodb_uri()
        if not uri:
            raise ValueError(
                "REPOSITORY_BACKEND=mongodb but MONGODB_URI not set. "
                "Set MONGODB_URI in .env or use REPOSITORY_BACKEND=inmemory"
            )
        _mongo_client = AsyncIOMotorClient(uri)
    return _mongo_client


def _backend() -> str:
    mode = get_repository_backend()
    if mode not in _BACKENDS:
        raise ValueError(
            f"Unknown REPOSITORY_BACKEND {mode!r}. Valid values are: {', '.join(_BACKENDS)}"
        )
    return mode


def create_offering_store() -> IOfferingStore:
    """Create offering store based on REPOSITORY_BACKEND.

    Raises:
        ValueError: On an unknown backend, or mongodb without MONGODB_URI
    """
    if _backend() == "mongodb":
        from infrastructure.persistence.mongodb.offering_store import MongoOfferingStore

        return MongoOfferingStore(client=_get_mongo_client())
    return InMemoryOfferingStore()


def create_order_repository() -> IOrderRepository:
    """Create order repository based on REPOSITORY_BACKEND."""
    if _backend() == "mongodb":
        from infrastructure.persistence.mongodb.order_repository import MongoOrderRepository

        return MongoOrderRepository(client=_get_mongo_client())
    return InMemoryOrderRepository()


def create_account_store() -> IAccountStore:
    """Create account store based on REPOSITORY_BACKEND."""
    if _backend() == "mongodb":
        from infrastructure.persistence.mongodb.account_store import MongoAccountStore

        return MongoAccountStore(client=_get_mongo_client())
    return InMemoryAccountStore()


# Singleton instances (lazy initialization)
_offering_store: Optional[IOfferingStore] = None
_order_repository: Optional[IOrderRepository] = None
_account_store: Optional[IAccountStore] = None


def get_offering_store() -> IOfferingStore:
    global _offering_store
    if _offering_store is None:
        _offering_store = create_offering_store()
    return _offering_store


def get_order_repository() -> IOrderRepository:
    global _order_repository
    if _order_repository is None:
        _order_repository = create_order_repository()
    return _order_repository


def get_account_store() -> IAccountStore:
    global _account_store
    if _account_store is None:
        _account_store = create_account_store()
    return _account_store


def reset_repositories() -> None:
    """Reset singletons so the next get_* call re-reads the environment.

    Example:
        # In tests:
        monkeypatch.setenv("REPOSITORY_BACKEND", "inmemory")
        reset_repositories()
        store = get_offering_store()
    """
    global _offering_store, _order_repository, _account_store, _mongo_client
    _offering_store = None
    _order_repository = None
    _account_store = None
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None
