"""Unit tests for the payment outcome and delivery command handlers."""

from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.order.commands.complete_delivery import (
    CompleteDeliveryCommand,
    CompleteDeliveryCommandHandler,
)
from application.order.commands.confirm_cash_payment import (
    ConfirmCashPaymentCommand,
    ConfirmCashPaymentCommandHandler,
)
from application.order.commands.process_gateway_callback import (
    ProcessGatewayCallbackCommand,
    ProcessGatewayCallbackCommandHandler,
)
from application.order.locks import OrderLockRegistry
from domain.order.core.entities import Order, OrderLine
from domain.order.core.events import OrderDelivered
from domain.order.core.exceptions import ErrorKind, OrderingError
from domain.order.core.value_objects import OrderStatus, PaymentMethod


@pytest.fixture
def mock_coordinator():
    return AsyncMock()


@pytest.fixture
def mock_repository():
    return AsyncMock()


@pytest.fixture
def mock_event_bus():
    return AsyncMock()


def _confirmed_order() -> Order:
    order = Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 1, Decimal("5.00"))])
    order.select_payment_method(PaymentMethod.COD)
    order.confirm_cash_payment("driver-7", "schedule-1")
    order.collect_events()
    return order


class TestConfirmCashPaymentCommandHandler:
    """Test ConfirmCashPaymentCommandHandler."""

    @pytest.mark.asyncio
    async def test_delegates_and_publishes(self, mock_coordinator, mock_event_bus) -> None:
        order = Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 1, Decimal("5.00"))])
        order.collect_events()
        order.select_payment_method(PaymentMethod.COD)
        order.confirm_cash_payment("driver-7", "schedule-1")
        mock_coordinator.confirm_cash_payment.return_value = order

        handler = ConfirmCashPaymentCommandHandler(mock_coordinator, mock_event_bus)
        result = await handler.handle(ConfirmCashPaymentCommand(order.id, "driver-7"))

        assert result is order
        mock_coordinator.confirm_cash_payment.assert_awaited_once_with(order.id, "driver-7")
        assert mock_event_bus.publish.await_count == 2
        assert order.collect_events() == []

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_coordinator, mock_event_bus) -> None:
        mock_coordinator.confirm_cash_payment.side_effect = OrderingError.not_found("Order", "x")

        handler = ConfirmCashPaymentCommandHandler(mock_coordinator, mock_event_bus)
        with pytest.raises(OrderingError):
            await handler.handle(ConfirmCashPaymentCommand(uuid4(), "driver-7"))

        mock_event_bus.publish.assert_not_called()


class TestProcessGatewayCallbackCommandHandler:
    """Test ProcessGatewayCallbackCommandHandler."""

    @pytest.mark.asyncio
    async def test_replay_publishes_nothing(self, mock_coordinator, mock_event_bus) -> None:
        mock_coordinator.process_gateway_callback.return_value = _confirmed_order()
        payload = {"vnp_TxnRef": "x", "vnp_ResponseCode": "00"}

        handler = ProcessGatewayCallbackCommandHandler(mock_coordinator, mock_event_bus)
        order = await handler.handle(ProcessGatewayCallbackCommand(payload))

        assert order.status is OrderStatus.CONFIRMED
        mock_coordinator.process_gateway_callback.assert_awaited_once_with(payload)
        mock_event_bus.publish.assert_not_called()


class TestCompleteDeliveryCommandHandler:
    """Test CompleteDeliveryCommandHandler."""

    @pytest.fixture
    def handler(self, mock_repository, mock_event_bus):
        return CompleteDeliveryCommandHandler(mock_repository, mock_event_bus, OrderLockRegistry())

    @pytest.mark.asyncio
    async def test_marks_delivered(self, handler, mock_repository, mock_event_bus) -> None:
        order = _confirmed_order()
        mock_repository.get_by_id.return_value = order

        result = await handler.handle(CompleteDeliveryCommand(order.id))

        assert result.status is OrderStatus.DELIVERED
        mock_repository.save.assert_awaited_once_with(order)
        event = mock_event_bus.publish.call_args[0][0]
        assert isinstance(event, OrderDelivered)
        assert event.order_id == order.id

    @pytest.mark.asyncio
    async def test_pending_payment_rejected(self, handler, mock_repository) -> None:
        order = Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 1, Decimal("5.00"))])
        order.select_payment_method(PaymentMethod.COD)
        mock_repository.get_by_id.return_value = order

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(CompleteDeliveryCommand(order.id))

        assert exc_info.value.kind is ErrorKind.INVALID_STATE_TRANSITION
        assert exc_info.value.message == "Cannot complete delivery for order with status: pending_payment"
        mock_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_order(self, handler, mock_repository) -> None:
        mock_repository.get_by_id.return_value = None

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(CompleteDeliveryCommand(uuid4()))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
