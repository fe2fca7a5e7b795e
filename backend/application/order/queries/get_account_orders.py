"""Get account orders query - order history of one account."""

from dataclasses import dataclass
from typing import List
import logging

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.order_repository import IOrderRepository

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class GetAccountOrdersQuery:
    """
    Query: Orders of an account, newest first.

    Attributes:
        account_id: Owning account
        limit: Page size (1..100)
        offset: Orders to skip
    """

    account_id: str
    limit: int = 20
    offset: int = 0


class GetAccountOrdersQueryHandler:
    """Handler for GetAccountOrdersQuery."""

    def __init__(self, repository: IOrderRepository):
        self._repository = repository

    async def handle(self, query: GetAccountOrdersQuery) -> List[Order]:
        """
        Raises:
            OrderingError: VALIDATION on an out-of-range limit or negative offset
        """
        if not 1 <= query.limit <= MAX_PAGE_SIZE:
            raise OrderingError.validation(
                f"limit must be between 1 and {MAX_PAGE_SIZE}", limit=query.limit
            )
        if query.offset < 0:
            raise OrderingError.validation("offset cannot be negative", offset=query.offset)

        orders = await self._repository.get_by_account(
            query.account_id, limit=query.limit, offset=query.offset
        )

        logger.debug(
            "Account orders retrieved",
            extra={"account_id": query.account_id, "count": len(orders)},
        )
        return orders
