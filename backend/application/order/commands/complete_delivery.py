"""Complete delivery command and handler.

Marks a confirmed order as delivered. The delivery schedule itself is
closed by the OrderDelivered event handler.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.order_repository import IOrderRepository
from domain.shared.ports.event_bus import IEventBus

from ..locks import OrderLockRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompleteDeliveryCommand:
    order_id: UUID


class CompleteDeliveryCommandHandler:
    """Handler for CompleteDeliveryCommand."""

    def __init__(
        self,
        repository: IOrderRepository,
        event_bus: IEventBus,
        locks: OrderLockRegistry,
    ):
        self._repository = repository
        self._event_bus = event_bus
        self._locks = locks

    async def handle(self, command: CompleteDeliveryCommand) -> Order:
        """
        Raises:
            OrderingError: NOT_FOUND, INVALID_STATE_TRANSITION unless the
                order is "confirmed"
        """
        async with self._locks.hold(command.order_id):
            order = await self._repository.get_by_id(command.order_id)
            if order is None:
                raise OrderingError.not_found("Order", command.order_id)

            order.mark_delivered()
            await self._repository.save(order)

        logger.info("Order delivered", extra={"order_id": str(order.id)})

        for event in order.collect_events():
            await self._event_bus.publish(event)

        return order
