"""MongoDB implementation of the order repository.

Each Order is one document with its lines embedded, so saving an order
(status, release marks, confirmation data) is a single atomic write.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from pymongo.errors import DuplicateKeyError

from domain.order.core.entities.order import Order
from domain.order.core.entities.order_line import OrderLine
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.payment_method import PaymentMethod
from infrastructure.persistence.mongodb.base import MongoBaseRepository


class MongoOrderRepository(MongoBaseRepository[Order]):
    """
    MongoDB implementation of IOrderRepository.

    Document Schema:
    {
        "_id": "uuid-string",
        "account_id": "string",
        "ordered_at": "2025-11-12T10:00:00+00:00",
        "status": "pending_payment",
        "payment_method": "GATEWAY",
        "total_amount": Decimal128("18.00"),
        "lines": [
            {
                "id": "uuid-string",
                "offering_id": "uuid-string",
                "quantity": 2,
                "unit_price": Decimal128("4.00"),
                "reservation_released": false,
                "created_at": "..."
            }
        ],
        "payment_confirmed_at": null,
        "payment_confirmed_by": null,
        "gateway_transaction_id": null,
        "delivery_schedule_id": null,
        "delivery_address": null,
        "delivery_contact": null,
        "version": 3,
        "created_at": "...",
        "updated_at": "..."
    }

    Saves replace the document only when its stored version equals the
    version the order was loaded with; a mismatch surfaces as CONFLICT.

    Indexes:
    - (account_id, ordered_at): For account order history
    """

    @property
    def collection_name(self) -> str:
        return "orders"

    def to_document(self, entity: Order) -> Dict[str, Any]:
        order = entity
        return {
            "_id": self.uuid_to_str(order.id),
            "account_id": order.account_id,
            "ordered_at": self.datetime_to_iso(order.ordered_at),
            "status": order.status.value,
            "payment_method": order.payment_method.value if order.payment_method else None,
            "total_amount": self.decimal_to_bson(order.total_amount),
            "lines": [self._line_to_dict(line) for line in order.lines],
            "payment_confirmed_at": self.optional_iso(order.payment_confirmed_at),
            "payment_confirmed_by": order.payment_confirmed_by,
            "gateway_transaction_id": order.gateway_transaction_id,
            "delivery_schedule_id": order.delivery_schedule_id,
            "delivery_address": order.delivery_address,
            "delivery_contact": order.delivery_contact,
            "version": order.version,
            "created_at": self.datetime_to_iso(order.created_at),
            "updated_at": self.datetime_to_iso(order.updated_at),
        }

    def from_document(self, doc: Dict[str, Any]) -> Order:
        try:
            method = doc.get("payment_method")
            confirmed_at = doc.get("payment_confirmed_at")
            return Order(
                id=self.str_to_uuid(doc["_id"]),
                account_id=doc["account_id"],
                ordered_at=self.iso_to_datetime(doc["ordered_at"]),
                lines=[self._dict_to_line(d) for d in doc.get("lines", [])],
                status=OrderStatus(doc["status"]),
                payment_method=PaymentMethod(method) if method else None,
                total_amount=self.bson_to_decimal(doc["total_amount"]),
                payment_confirmed_at=self.iso_to_datetime(confirmed_at) if confirmed_at else None,
                payment_confirmed_by=doc.get("payment_confirmed_by"),
                gateway_transaction_id=doc.get("gateway_transaction_id"),
                delivery_schedule_id=doc.get("delivery_schedule_id"),
                delivery_address=doc.get("delivery_address"),
                delivery_contact=doc.get("delivery_contact"),
                version=int(doc.get("version") or 0),
                created_at=self.iso_to_datetime(doc["created_at"]),
                updated_at=self.iso_to_datetime(doc["updated_at"]),
            )
        except KeyError as e:
            raise ValueError(f"Missing required field in MongoDB document: {e}") from e

    def _line_to_dict(self, line: OrderLine) -> Dict[str, Any]:
        return {
            "id": self.uuid_to_str(line.id),
            "offering_id": self.uuid_to_str(line.offering_id),
            "quantity": line.quantity,
            "unit_price": self.decimal_to_bson(line.unit_price),
            "reservation_released": line.reservation_released,
            "created_at": self.datetime_to_iso(line.created_at),
        }

    def _dict_to_line(self, line_dict: Dict[str, Any]) -> OrderLine:
        return OrderLine(
            id=self.str_to_uuid(line_dict["id"]),
            offering_id=self.str_to_uuid(line_dict["offering_id"]),
            quantity=int(line_dict["quantity"]),
            unit_price=self.bson_to_decimal(line_dict["unit_price"]),
            reservation_released=bool(line_dict.get("reservation_released", False)),
            created_at=self.iso_to_datetime(line_dict["created_at"]),
        )

    # ============================================================
    # Repository Operations (IOrderRepository interface)
    # ============================================================

    async def save(self, order: Order) -> None:
        """
        Raises:
            OrderingError: CONFLICT if the stored version moved on
        """
        expected = order.version
        order.updated_at = datetime.now(timezone.utc)

        document = self.to_document(order)
        document["version"] = expected + 1
        # A missing version field counts as revision 0
        guard = {"version": expected} if expected else {"version": {"$in": [None, 0]}}

        try:
            await self._replace_one(document, guard)
        except DuplicateKeyError as e:
            raise OrderingError.conflict(order.id, expected) from e

        order.version = expected + 1

    async def get_by_id(self, order_id: UUID) -> Optional[Order]:
        doc = await self._find_one({"_id": self.uuid_to_str(order_id)})
        if doc is None:
            return None

        order = self.from_document(doc)
        order.validate_invariants()
        return order

    async def get_by_account(
        self,
        account_id: str,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Order]:
        docs = await self._find_many(
            {"account_id": account_id},
            sort=[("ordered_at", -1)],
            limit=limit,
            skip=offset,
        )
        orders = [self.from_document(doc) for doc in docs]
        for order in orders:
            order.validate_invariants()
        return orders

    async def exists(self, order_id: UUID) -> bool:
        return await self._count({"_id": self.uuid_to_str(order_id)}) > 0

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("account_id", 1), ("ordered_at", -1)])
