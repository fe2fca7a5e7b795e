"""Handler for OrderDelivered domain event.

Closes the delivery schedule once the order is marked delivered.
"""

import logging

from domain.order.core.events.order_delivered import OrderDelivered
from domain.order.core.ports.delivery_scheduler import IDeliveryScheduler

logger = logging.getLogger(__name__)


class OrderDeliveredHandler:
    """Handler for OrderDelivered domain events."""

    def __init__(self, scheduler: IDeliveryScheduler):
        self._scheduler = scheduler

    async def handle(self, event: OrderDelivered) -> None:
        """Mark the order's delivery schedule completed.

        Errors propagate to the event bus, which logs them.
        """
        await self._scheduler.mark_completed(event.order_id)

        logger.info(
            "order_delivered",
            extra={
                **event.log_fields(),
                "order_id": str(event.order_id),
                "account_id": event.account_id,
            },
        )
