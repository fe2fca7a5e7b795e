"""Unit tests for order queries."""

from decimal import Decimal
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from application.order.queries import (
    GetAccountOrdersQuery,
    GetAccountOrdersQueryHandler,
    GetOrderQuery,
    GetOrderQueryHandler,
)
from application.order.queries.get_account_orders import MAX_PAGE_SIZE
from domain.order.core.entities import Order, OrderLine
from domain.order.core.exceptions import ErrorKind, OrderingError


@pytest.fixture
def mock_repository():
    return AsyncMock()


@pytest.fixture
def order():
    return Order.create(account_id="acc-1", lines=[OrderLine.create(uuid4(), 2, Decimal("5.00"))])


class TestGetOrderQueryHandler:
    """Test GetOrderQueryHandler."""

    @pytest.mark.asyncio
    async def test_returns_order(self, mock_repository, order) -> None:
        mock_repository.get_by_id.return_value = order

        result = await GetOrderQueryHandler(mock_repository).handle(GetOrderQuery(order.id))

        assert result is order
        mock_repository.get_by_id.assert_awaited_once_with(order.id)

    @pytest.mark.asyncio
    async def test_owner_check(self, mock_repository, order) -> None:
        mock_repository.get_by_id.return_value = order
        handler = GetOrderQueryHandler(mock_repository)

        assert await handler.handle(GetOrderQuery(order.id, account_id="acc-1")) is order

        with pytest.raises(OrderingError) as exc_info:
            await handler.handle(GetOrderQuery(order.id, account_id="acc-2"))
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_missing(self, mock_repository) -> None:
        mock_repository.get_by_id.return_value = None

        with pytest.raises(OrderingError) as exc_info:
            await GetOrderQueryHandler(mock_repository).handle(GetOrderQuery(uuid4()))

        assert exc_info.value.kind is ErrorKind.NOT_FOUND


class TestGetAccountOrdersQueryHandler:
    """Test GetAccountOrdersQueryHandler."""

    @pytest.mark.asyncio
    async def test_passes_pagination(self, mock_repository, order) -> None:
        mock_repository.get_by_account.return_value = [order]

        result = await GetAccountOrdersQueryHandler(mock_repository).handle(
            GetAccountOrdersQuery("acc-1", limit=5, offset=10)
        )

        assert result == [order]
        mock_repository.get_by_account.assert_awaited_once_with("acc-1", limit=5, offset=10)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,offset", [(0, 0), (MAX_PAGE_SIZE + 1, 0), (10, -1)])
    async def test_rejects_bad_pagination(self, mock_repository, limit, offset) -> None:
        with pytest.raises(OrderingError) as exc_info:
            await GetAccountOrdersQueryHandler(mock_repository).handle(
                GetAccountOrdersQuery("acc-1", limit=limit, offset=offset)
            )

        assert exc_info.value.kind is ErrorKind.VALIDATION
        mock_repository.get_by_account.assert_not_called()
