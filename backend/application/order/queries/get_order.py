"""Get order query - retrieve single order by ID."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID
import logging

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.order_repository import IOrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetOrderQuery:
    """
    Query: Get single order by ID.

    Attributes:
        order_id: Order to retrieve
        account_id: When given, the order must belong to this account
    """

    order_id: UUID
    account_id: Optional[str] = None


class GetOrderQueryHandler:
    """Handler for GetOrderQuery."""

    def __init__(self, repository: IOrderRepository):
        self._repository = repository

    async def handle(self, query: GetOrderQuery) -> Order:
        """
        Raises:
            OrderingError: NOT_FOUND if missing or owned by another account
        """
        order = await self._repository.get_by_id(query.order_id)

        if order is None or (query.account_id is not None and order.account_id != query.account_id):
            logger.debug(
                "Order not found or access denied",
                extra={"order_id": str(query.order_id), "account_id": query.account_id},
            )
            raise OrderingError.not_found("Order", query.order_id)

        return order
