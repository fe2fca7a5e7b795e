"""Base MongoDB repository with reusable patterns.

Provides the plumbing shared by the ordering collections:
- Connection management (motor client, database from config)
- Document mapping hooks (domain <-> MongoDB)
- UUID / datetime / Decimal conversion
- Logged, re-raised driver errors

Concrete stores inherit from MongoBaseRepository.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from uuid import UUID

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from infrastructure.config import get_mongodb_database, get_mongodb_uri

TEntity = TypeVar("TEntity")

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB-backed stores.

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity

    Example:
        class MongoOrderRepository(MongoBaseRepository[Order]):
            @property
            def collection_name(self) -> str:
                return "orders"
    """

    def __init__(self, client: Optional[AsyncIOMotorClient[Dict[str, Any]]] = None):
        """
        Args:
            client: Motor client (if None, creates new one from config)

        Raises:
            ValueError: If no client is given and MONGODB_URI is not set
        """
        if client is None:
            uri = get_mongodb_uri()
            if not uri:
                raise ValueError(
                    "MONGODB_URI not configured. "
                    "Set MONGODB_URI, MONGODB_USER, "
                    "and MONGODB_PASSWORD environment variables."
                )
            self._client: AsyncIOMotorClient[Dict[str, Any]] = AsyncIOMotorClient(uri)
        else:
            self._client = client

        self._db = self._client[get_mongodb_database()]
        self._collection = self._db[self.collection_name]

        logger.info(
            "Mongo store initialized",
            extra={"store": self.__class__.__name__, "collection": self.collection_name},
        )

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Raises:
            ValueError: If document is invalid or missing required fields
        """

    @property
    def collection(self) -> AsyncIOMotorCollection[Dict[str, Any]]:
        return self._collection

    # ============================================================
    # Conversion helpers
    # ============================================================

    @staticmethod
    def uuid_to_str(uuid_value: UUID) -> str:
        return str(uuid_value)

    @staticmethod
    def str_to_uuid(str_value: str) -> UUID:
        return UUID(str_value)

    @staticmethod
    def datetime_to_iso(dt: datetime) -> str:
        """
        Raises:
            ValueError: If dt is naive
        """
        if dt.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware")
        return dt.isoformat()

    @staticmethod
    def iso_to_datetime(iso_str: str) -> datetime:
        """Parse ISO 8601; naive values are taken as UTC."""
        dt = datetime.fromisoformat(iso_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    @staticmethod
    def optional_iso(dt: Optional[datetime]) -> Optional[str]:
        return MongoBaseRepository.datetime_to_iso(dt) if dt is not None else None

    @staticmethod
    def date_to_iso(value: date) -> str:
        return value.isoformat()

    @staticmethod
    def decimal_to_bson(amount: Decimal) -> Decimal128:
        return Decimal128(amount)

    @staticmethod
    def bson_to_decimal(value: Any) -> Decimal:
        """Accept Decimal128 (normal case) or a plain number/string."""
        if isinstance(value, Decimal128):
            return value.to_decimal()
        return Decimal(str(value))

    # ============================================================
    # Logged driver calls
    # ============================================================

    async def _find_one(
        self,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection.find_one(filter_dict, projection)
        except Exception as e:
            logger.error(
                "find_one failed",
                extra={"collection": self.collection_name, "filter": str(filter_dict), "error": str(e)},
            )
            raise

    async def _find_many(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self._collection.find(filter_dict)
            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=limit)
        except Exception as e:
            logger.error(
                "find failed",
                extra={"collection": self.collection_name, "filter": str(filter_dict), "error": str(e)},
            )
            raise

    async def _replace_one(
        self,
        document: Dict[str, Any],
        guard: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Upsert a whole document by its _id.

        Args:
            document: Replacement document
            guard: Extra filter fields the stored document must match

        Raises:
            DuplicateKeyError: If the _id exists but the guard does not match
        """
        try:
            await self._collection.replace_one({"_id": document["_id"], **(guard or {})}, document, upsert=True)
        except DuplicateKeyError:
            raise
        except Exception as e:
            logger.error(
                "replace_one failed",
                extra={"collection": self.collection_name, "id": document.get("_id"), "error": str(e)},
            )
            raise

    async def _find_one_and_update(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Apply update to the first document matching filter, atomically.

        Returns:
            The document after the update, or None when nothing matched
        """
        try:
            return await self._collection.find_one_and_update(
                filter_dict,
                update_dict,
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            logger.error(
                "find_one_and_update failed",
                extra={"collection": self.collection_name, "filter": str(filter_dict), "error": str(e)},
            )
            raise

    async def _count(self, filter_dict: Dict[str, Any]) -> int:
        try:
            return await self._collection.count_documents(filter_dict)
        except Exception as e:
            logger.error(
                "count failed",
                extra={"collection": self.collection_name, "filter": str(filter_dict), "error": str(e)},
            )
            raise

    async def close(self) -> None:
        self._client.close()
        logger.info("Mongo connection closed", extra={"store": self.__class__.__name__})
