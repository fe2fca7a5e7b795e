"""MongoDB implementation of the menu offering store.

Stock changes are single-document atomic updates: a reservation is a
find_one_and_update whose filter requires enough stock, so concurrent
reservations can never drive available_quantity below zero.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from domain.order.core.entities.menu_offering import MenuOffering
from infrastructure.persistence.mongodb.base import MongoBaseRepository


class MongoOfferingStore(MongoBaseRepository[MenuOffering]):
    """
    MongoDB implementation of IOfferingStore.

    Document Schema:
    {
        "_id": "uuid-string",
        "menu_id": "uuid-string",
        "recipe_id": "uuid-string",
        "recipe_name": "Grilled chicken bowl",
        "menu_date": "2025-11-12",
        "unit_price": Decimal128("5.00"),
        "available_quantity": 10,
        "created_at": "2025-11-12T10:00:00+00:00",
        "updated_at": "2025-11-12T10:00:00+00:00"
    }

    Indexes:
    - (menu_id, recipe_name): For menu listing
    """

    @property
    def collection_name(self) -> str:
        return "menu_offerings"

    def to_document(self, entity: MenuOffering) -> Dict[str, Any]:
        offering = entity
        return {
            "_id": self.uuid_to_str(offering.id),
            "menu_id": self.uuid_to_str(offering.menu_id),
            "recipe_id": self.uuid_to_str(offering.recipe_id),
            "recipe_name": offering.recipe_name,
            "menu_date": self.date_to_iso(offering.menu_date),
            "unit_price": self.decimal_to_bson(offering.unit_price),
            "available_quantity": offering.available_quantity,
            "created_at": self.datetime_to_iso(offering.created_at),
            "updated_at": self.datetime_to_iso(offering.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> MenuOffering:
        try:
            return MenuOffering(
                id=self.str_to_uuid(doc["_id"]),
                menu_id=self.str_to_uuid(doc["menu_id"]),
                recipe_id=self.str_to_uuid(doc["recipe_id"]),
                recipe_name=doc["recipe_name"],
                menu_date=date.fromisoformat(doc["menu_date"]),
                unit_price=self.bson_to_decimal(doc["unit_price"]),
                available_quantity=int(doc["available_quantity"]),
                created_at=self.iso_to_datetime(doc["created_at"]),
                updated_at=self.iso_to_datetime(doc["updated_at"]),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field in MongoDB document: {e}") from e

    async def get(self, offering_id: UUID) -> Optional[MenuOffering]:
        doc = await self._find_one({"_id": self.uuid_to_str(offering_id)})
        return self.from_document(doc) if doc is not None else None

    async def save(self, offering: MenuOffering) -> None:
        await self._replace_one(self.to_document(offering))

    async def list_by_menu(self, menu_id: UUID) -> List[MenuOffering]:
        docs = await self._find_many(
            {"menu_id": self.uuid_to_str(menu_id)},
            sort=[("recipe_name", 1)],
        )
        return [self.from_document(doc) for doc in docs]

    async def try_decrement(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        if quantity <= 0:
            return None
        doc = await self._find_one_and_update(
            {
                "_id": self.uuid_to_str(offering_id),
                "available_quantity": {"$gte": quantity},
            },
            self._stock_update(-quantity),
        )
        return self.from_document(doc) if doc is not None else None

    async def increment(self, offering_id: UUID, quantity: int) -> Optional[MenuOffering]:
        doc = await self._find_one_and_update(
            {"_id": self.uuid_to_str(offering_id)},
            self._stock_update(quantity),
        )
        return self.from_document(doc) if doc is not None else None

    def _stock_update(self, delta: int) -> Dict[str, Any]:
        return {
            "$inc": {"available_quantity": delta},
            "$set": {"updated_at": self.datetime_to_iso(datetime.now(timezone.utc))},
        }

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("menu_id", 1), ("recipe_name", 1)])
