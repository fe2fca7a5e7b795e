"""Delivery scheduler port (interface)."""

from datetime import datetime
from typing import Protocol
from uuid import UUID


class IDeliveryScheduler(Protocol):
    """
    Interface for the delivery scheduling collaborator.

    A schedule is created once per order, when its payment is confirmed.
    """

    async def create_schedule(
        self,
        order_id: UUID,
        delivery_time_hint: datetime,
        address: str,
        contact: str,
    ) -> str:
        """
        Create the delivery schedule of an order.

        Args:
            order_id: Confirmed order
            delivery_time_hint: Planned delivery time (must be in the future)
            address: Delivery address
            contact: Driver / recipient contact

        Returns:
            Identifier of the created schedule

        Raises:
            OrderingError: CONSTRAINT_VIOLATION if the order already has a
                schedule, VALIDATION on a past time or blank address
        """
        ...

    async def mark_completed(self, order_id: UUID) -> None:
        """Flag the order's schedule as delivered."""
        ...

    async def cancel_schedule(self, order_id: UUID) -> None:
        """
        Drop the pending schedule of an order whose confirmation was not
        persisted. No-op if the order has no schedule.

        Raises:
            OrderingError: INVALID_STATE_TRANSITION if the delivery is completed
        """
        ...
