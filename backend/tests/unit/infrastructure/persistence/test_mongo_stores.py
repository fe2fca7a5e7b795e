"""Unit tests for the MongoDB stores with a mocked motor collection."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from bson.decimal128 import Decimal128
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from domain.order.core.entities import MenuOffering, Order, OrderLine
from domain.order.core.exceptions import ErrorKind, OrderingError
from domain.order.core.value_objects import OrderStatus, PaymentMethod
from infrastructure.persistence.mongodb import (
    MongoAccountStore,
    MongoOfferingStore,
    MongoOrderRepository,
)


@pytest.fixture
def collection():
    return MagicMock(
        find_one=AsyncMock(),
        find_one_and_update=AsyncMock(),
        replace_one=AsyncMock(),
        count_documents=AsyncMock(),
        create_index=AsyncMock(),
    )


def _with_collection(store, collection):
    store._collection = collection
    return store


@pytest.fixture
def offering_store(collection):
    return _with_collection(MongoOfferingStore(client=MagicMock()), collection)


@pytest.fixture
def order_repository(collection):
    return _with_collection(MongoOrderRepository(client=MagicMock()), collection)


@pytest.fixture
def offering():
    return MenuOffering.publish(
        menu_id=uuid4(),
        recipe_id=uuid4(),
        recipe_name="Chicken bowl",
        menu_date=date(2026, 10, 18),
        unit_price=Decimal("5.00"),
        quantity=10,
    )


class TestMongoOfferingStore:
    """Test stock updates are conditional single-document writes."""

    @pytest.mark.asyncio
    async def test_try_decrement_filters_on_stock(self, offering_store, collection, offering) -> None:
        doc = offering_store.to_document(offering)
        doc["available_quantity"] = 7
        collection.find_one_and_update.return_value = doc

        updated = await offering_store.try_decrement(offering.id, 3)

        assert updated.available_quantity == 7
        filter_dict, update_dict = collection.find_one_and_update.call_args[0]
        assert filter_dict == {"_id": str(offering.id), "available_quantity": {"$gte": 3}}
        assert update_dict["$inc"] == {"available_quantity": -3}
        assert collection.find_one_and_update.call_args[1]["return_document"] is ReturnDocument.AFTER

    @pytest.mark.asyncio
    async def test_try_decrement_no_match(self, offering_store, collection, offering) -> None:
        collection.find_one_and_update.return_value = None

        assert await offering_store.try_decrement(offering.id, 30) is None

    @pytest.mark.asyncio
    async def test_try_decrement_non_positive_skips_write(self, offering_store, collection, offering) -> None:
        assert await offering_store.try_decrement(offering.id, 0) is None
        collection.find_one_and_update.assert_not_called()

    @pytest.mark.asyncio
    async def test_increment(self, offering_store, collection, offering) -> None:
        collection.find_one_and_update.return_value = offering_store.to_document(offering)

        await offering_store.increment(offering.id, 2)

        filter_dict, update_dict = collection.find_one_and_update.call_args[0]
        assert filter_dict == {"_id": str(offering.id)}
        assert update_dict["$inc"] == {"available_quantity": 2}

    def test_price_stored_as_decimal128(self, offering_store, offering) -> None:
        doc = offering_store.to_document(offering)

        assert doc["unit_price"] == Decimal128("5.00")
        assert offering_store.from_document(doc).unit_price == Decimal("5.00")

    def test_missing_field_raises(self, offering_store, offering) -> None:
        doc = offering_store.to_document(offering)
        del doc["recipe_name"]

        with pytest.raises(ValueError, match="Missing required field"):
            offering_store.from_document(doc)

    @pytest.mark.asyncio
    async def test_driver_errors_propagate(self, offering_store, collection, offering) -> None:
        collection.find_one_and_update.side_effect = ConnectionError("down")

        with pytest.raises(ConnectionError):
            await offering_store.increment(offering.id, 1)


class TestMongoOrderRepository:
    """Test order document mapping and upsert."""

    @pytest.mark.asyncio
    async def test_save_upserts_and_loads_back(self, order_repository, collection) -> None:
        order = Order.create(
            account_id="acc-1",
            lines=[OrderLine.create(uuid4(), 2, Decimal("4.00")), OrderLine.create(uuid4(), 1, Decimal("10.00"))],
        )
        order.select_payment_method(PaymentMethod.GATEWAY)
        order.mark_line_released(order.lines[0].id)

        await order_repository.save(order)

        filter_dict, document = collection.replace_one.call_args[0]
        assert filter_dict == {"_id": str(order.id), "version": {"$in": [None, 0]}}
        assert collection.replace_one.call_args[1] == {"upsert": True}
        assert document["version"] == 1
        assert order.version == 1

        collection.find_one.return_value = document
        loaded = await order_repository.get_by_id(order.id)

        assert loaded.status is OrderStatus.PENDING_PAYMENT
        assert loaded.payment_method is PaymentMethod.GATEWAY
        assert loaded.total_amount == Decimal("18.00")
        assert [line.reservation_released for line in loaded.lines] == [True, False]

    @pytest.mark.asyncio
    async def test_save_guards_on_loaded_version(self, order_repository, collection) -> None:
        order = Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 1, Decimal("5.00"))])
        order.version = 4

        await order_repository.save(order)

        filter_dict, document = collection.replace_one.call_args[0]
        assert filter_dict == {"_id": str(order.id), "version": 4}
        assert document["version"] == 5
        assert order.version == 5

    @pytest.mark.asyncio
    async def test_stale_version_raises_conflict(self, order_repository, collection) -> None:
        order = Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 1, Decimal("5.00"))])
        order.version = 2
        collection.replace_one.side_effect = DuplicateKeyError("E11000 duplicate key error")

        with pytest.raises(OrderingError) as exc_info:
            await order_repository.save(order)

        assert exc_info.value.kind is ErrorKind.CONFLICT
        assert order.version == 2

    @pytest.mark.asyncio
    async def test_get_missing(self, order_repository, collection) -> None:
        collection.find_one.return_value = None
        assert await order_repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_exists(self, order_repository, collection) -> None:
        collection.count_documents.return_value = 1
        assert await order_repository.exists(uuid4())


class TestMongoAccountStore:
    """Test account lookups."""

    @pytest.mark.asyncio
    async def test_account_exists(self, collection) -> None:
        store = _with_collection(MongoAccountStore(client=MagicMock()), collection)
        collection.count_documents.return_value = 0

        assert not await store.account_exists("acc-1")
        assert collection.count_documents.call_args[0][0] == {"_id": "acc-1"}
