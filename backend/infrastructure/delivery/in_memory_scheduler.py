"""In-memory delivery scheduler.

Implements IDeliveryScheduler for a single process: one schedule per
order, created when the order's payment is confirmed.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from domain.order.core.exceptions.ordering_errors import OrderingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliverySchedule:
    """Planned delivery of one order."""

    id: str
    order_id: UUID
    delivery_time: datetime
    address: str
    driver_contact: str
    created_at: datetime
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


def _ensure_future(delivery_time: datetime) -> None:
    if delivery_time.tzinfo is None:
        raise OrderingError.validation("Delivery time must be timezone-aware")
    if delivery_time <= datetime.now(timezone.utc):
        raise OrderingError.validation(
            "Delivery time must be in the future",
            delivery_time=delivery_time.isoformat(),
        )


class InMemoryDeliveryScheduler:
    """
    In-memory implementation of IDeliveryScheduler port.

    Example:
        >>> scheduler = InMemoryDeliveryScheduler()
        >>> schedule_id = await scheduler.create_schedule(
        ...     order_id, datetime.now(timezone.utc) + timedelta(days=1), "12 Main St", "TBD"
        ... )
    """

    def __init__(self) -> None:
        self._by_order: Dict[UUID, DeliverySchedule] = {}
        self._lock = asyncio.Lock()

    async def create_schedule(
        self,
        order_id: UUID,
        delivery_time_hint: datetime,
        address: str,
        contact: str,
    ) -> str:
        """
        Raises:
            OrderingError: VALIDATION on a past time or blank address,
                CONSTRAINT_VIOLATION if the order already has a schedule
        """
        _ensure_future(delivery_time_hint)

        if not address or not address.strip():
            raise OrderingError.validation("Delivery address is required")

        async with self._lock:
            if order_id in self._by_order:
                raise OrderingError.constraint_violation(
                    "one_schedule_per_order",
                    f"Delivery schedule already exists for order {order_id}",
                    entity="DeliverySchedule",
                    entity_id=order_id,
                )

            schedule = DeliverySchedule(
                id=str(uuid4()),
                order_id=order_id,
                delivery_time=delivery_time_hint,
                address=address.strip(),
                driver_contact=(contact or "").strip(),
                created_at=datetime.now(timezone.utc),
            )
            self._by_order[order_id] = schedule

        logger.info(
            "Delivery scheduled",
            extra={
                "order_id": str(order_id),
                "schedule_id": schedule.id,
                "delivery_time": schedule.delivery_time.isoformat(),
            },
        )
        return schedule.id

    async def get_for_order(self, order_id: UUID) -> Optional[DeliverySchedule]:
        return self._by_order.get(order_id)

    async def list_for_orders(self, order_ids: Iterable[UUID]) -> List[DeliverySchedule]:
        """Schedules of the given orders, earliest delivery first."""
        schedules = [self._by_order[oid] for oid in order_ids if oid in self._by_order]
        return sorted(schedules, key=lambda s: s.delivery_time)

    async def update_delivery_time(self, order_id: UUID, delivery_time: datetime) -> DeliverySchedule:
        """
        Reschedule a pending delivery.

        Raises:
            OrderingError: NOT_FOUND if the order has no schedule,
                VALIDATION on a past time, INVALID_STATE_TRANSITION once
                the delivery is completed
        """
        _ensure_future(delivery_time)

        async with self._lock:
            schedule = self._by_order.get(order_id)
            if schedule is None:
                raise OrderingError.not_found("DeliverySchedule", order_id)
            if schedule.is_completed:
                raise OrderingError.invalid_transition(
                    order_id, "Cannot update delivery time for a delivered order"
                )

            updated = replace(schedule, delivery_time=delivery_time)
            self._by_order[order_id] = updated

        logger.info(
            "Delivery rescheduled",
            extra={"order_id": str(order_id), "delivery_time": delivery_time.isoformat()},
        )
        return updated

    async def mark_completed(self, order_id: UUID) -> None:
        """
        Raises:
            OrderingError: NOT_FOUND if the order has no schedule,
                INVALID_STATE_TRANSITION if already completed
        """
        async with self._lock:
            schedule = self._by_order.get(order_id)
            if schedule is None:
                raise OrderingError.not_found("DeliverySchedule", order_id)
            if schedule.is_completed:
                raise OrderingError.invalid_transition(order_id, "Order has already been delivered")

            self._by_order[order_id] = replace(schedule, completed_at=datetime.now(timezone.utc))

        logger.info("Delivery completed", extra={"order_id": str(order_id)})

    async def cancel_schedule(self, order_id: UUID) -> None:
        """
        Raises:
            OrderingError: INVALID_STATE_TRANSITION if already completed
        """
        async with self._lock:
            schedule = self._by_order.get(order_id)
            if schedule is None:
                return
            if schedule.is_completed:
                raise OrderingError.invalid_transition(
                    order_id, "Cannot cancel the schedule of a delivered order"
                )
            del self._by_order[order_id]

        logger.info("Delivery schedule cancelled", extra={"order_id": str(order_id), "schedule_id": schedule.id})

    def clear(self) -> None:
        """Clear all schedules (for testing)."""
        self._by_order.clear()
