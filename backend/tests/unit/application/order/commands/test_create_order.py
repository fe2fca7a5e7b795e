"""Unit tests for CreateOrderCommand and handler."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.order.commands.create_order import (
    CreateOrderCommand,
    CreateOrderCommandHandler,
    OrderItem,
)
from domain.order.core.entities import Order
from domain.order.core.events import OrderCreated
from domain.order.core.exceptions import ErrorKind, OrderingError
from domain.order.core.value_objects import OrderStatus


@pytest.fixture
def mock_repository():
    return AsyncMock()


@pytest.fixture
def mock_accounts():
    accounts = AsyncMock()
    accounts.account_exists.return_value = True
    return accounts


@pytest.fixture
def mock_ledger():
    return AsyncMock()


@pytest.fixture
def mock_compensator():
    return AsyncMock()


@pytest.fixture
def mock_event_bus():
    return AsyncMock()


@pytest.fixture
def handler(mock_repository, mock_accounts, mock_ledger, mock_compensator, mock_event_bus):
    return CreateOrderCommandHandler(
        repository=mock_repository,
        account_store=mock_accounts,
        ledger=mock_ledger,
        compensator=mock_compensator,
        event_bus=mock_event_bus,
    )


class TestCreateOrderCommandHandler:
    """Test CreateOrderCommandHandler."""

    @pytest.mark.asyncio
    async def test_creates_pending_order_with_total(
        self, handler, mock_repository, mock_ledger, mock_event_bus
    ) -> None:
        a, b = uuid4(), uuid4()
        mock_ledger.reserve.side_effect = [Decimal("4.00"), Decimal("10.00")]

        order = await handler.handle(
            CreateOrderCommand(account_id="acc-1", items=[OrderItem(a, 2), OrderItem(b, 1)])
        )

        assert isinstance(order, Order)
        assert order.status is OrderStatus.PENDING
        assert order.total_amount == Decimal("18.00")
        assert [line.unit_price for line in order.lines] == [Decimal("4.00"), Decimal("10.00")]
        mock_repository.save.assert_awaited_once_with(order)

        event = mock_event_bus.publish.call_args[0][0]
        assert isinstance(event, OrderCreated)
        assert event.order_id == order.id

    @pytest.mark.asyncio
    async def test_empty_items_rejected(self, handler, mock_ledger, mock_repository) -> None:
        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(CreateOrderCommand(account_id="acc-1", items=[]))

        assert exc_info.value.kind is ErrorKind.VALIDATION
        mock_ledger.reserve.assert_not_called()
        mock_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_positive_quantity_rejected_before_reserving(self, handler, mock_ledger) -> None:
        command = CreateOrderCommand(
            account_id="acc-1", items=[OrderItem(uuid4(), 2), OrderItem(uuid4(), 0)]
        )

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(command)

        assert exc_info.value.kind is ErrorKind.VALIDATION
        mock_ledger.reserve.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_account(self, handler, mock_accounts, mock_ledger) -> None:
        mock_accounts.account_exists.return_value = False

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(CreateOrderCommand(account_id="ghost", items=[OrderItem(uuid4(), 1)]))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.entity == "Account"
        mock_ledger.reserve.assert_not_called()

    @pytest.mark.asyncio
    async def test_mid_loop_failure_releases_earlier_reservations(
        self, handler, mock_ledger, mock_compensator, mock_repository, mock_event_bus
    ) -> None:
        a, b = uuid4(), uuid4()
        mock_ledger.reserve.side_effect = [
            Decimal("4.00"),
            OrderingError.insufficient_stock(b, requested=8, available=5),
        ]

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(
                CreateOrderCommand(account_id="acc-1", items=[OrderItem(a, 2), OrderItem(b, 8)])
            )

        assert exc_info.value.kind is ErrorKind.INSUFFICIENT_STOCK
        released = list(mock_compensator.release_reservations.call_args[0][0])
        assert released == [(a, 2)]
        mock_repository.save.assert_not_called()
        mock_event_bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_first_item_failure_releases_nothing(self, handler, mock_ledger, mock_compensator) -> None:
        mock_ledger.reserve.side_effect = OrderingError.not_found("MenuOffering", "x")

        with pytest.raises(OrderingError):
            await handler.handle(CreateOrderCommand(account_id="acc-1", items=[OrderItem(uuid4(), 1)]))

        mock_compensator.release_reservations.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_failure_releases_all(
        self, handler, mock_ledger, mock_compensator, mock_repository
    ) -> None:
        a = uuid4()
        mock_ledger.reserve.return_value = Decimal("5.00")
        mock_repository.save.side_effect = ConnectionError("db down")

        with pytest.raises(ConnectionError):
            await handler.handle(CreateOrderCommand(account_id="acc-1", items=[OrderItem(a, 3)]))

        released = list(mock_compensator.release_reservations.call_args[0][0])
        assert released == [(a, 3)]

    @pytest.mark.asyncio
    async def test_cancellation_releases_earlier_reservations(
        self, handler, mock_ledger, mock_compensator, mock_repository
    ) -> None:
        a, b = uuid4(), uuid4()
        mock_ledger.reserve.side_effect = [Decimal("4.00"), asyncio.CancelledError()]

        with pytest.raises(asyncio.CancelledError):
            await handler.handle(
                CreateOrderCommand(account_id="acc-1", items=[OrderItem(a, 2), OrderItem(b, 1)])
            )

        released = list(mock_compensator.release_reservations.call_args[0][0])
        assert released == [(a, 2)]
        mock_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_delivery_details_kept(self, handler, mock_ledger) -> None:
        mock_ledger.reserve.return_value = Decimal("5.00")

        order = await handler.handle(
            CreateOrderCommand(
                account_id="acc-1",
                items=[OrderItem(uuid4(), 1)],
                delivery_address="12 Main St",
                delivery_contact="555-0101",
            )
        )

        assert order.delivery_address == "12 Main St"
        assert order.delivery_contact == "555-0101"
