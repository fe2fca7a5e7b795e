"""Unit tests for InMemoryDeliveryScheduler."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from domain.order.core.exceptions import ErrorKind, OrderingError
from infrastructure.delivery import InMemoryDeliveryScheduler


def _tomorrow() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=1)


@pytest.fixture
def scheduler() -> InMemoryDeliveryScheduler:
    return InMemoryDeliveryScheduler()


class TestCreateSchedule:
    """Test schedule creation."""

    @pytest.mark.asyncio
    async def test_creates_schedule(self, scheduler) -> None:
        order_id = uuid4()
        when = _tomorrow()

        schedule_id = await scheduler.create_schedule(order_id, when, "  12 Main St ", " TBD ")

        schedule = await scheduler.get_for_order(order_id)
        assert schedule.id == schedule_id
        assert schedule.delivery_time == when
        assert schedule.address == "12 Main St"
        assert schedule.driver_contact == "TBD"
        assert not schedule.is_completed

    @pytest.mark.asyncio
    async def test_one_schedule_per_order(self, scheduler) -> None:
        order_id = uuid4()
        await scheduler.create_schedule(order_id, _tomorrow(), "12 Main St", "TBD")

        with pytest.raises(OrderingError) as exc_info:
            await scheduler.create_schedule(order_id, _tomorrow(), "12 Main St", "TBD")

        assert exc_info.value.kind is ErrorKind.CONSTRAINT_VIOLATION
        assert exc_info.value.constraint == "one_schedule_per_order"

    @pytest.mark.asyncio
    async def test_past_time_rejected(self, scheduler) -> None:
        with pytest.raises(OrderingError) as exc_info:
            await scheduler.create_schedule(
                uuid4(), datetime.now(timezone.utc) - timedelta(minutes=1), "12 Main St", "TBD"
            )

        assert exc_info.value.kind is ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_blank_address_rejected(self, scheduler) -> None:
        with pytest.raises(OrderingError) as exc_info:
            await scheduler.create_schedule(uuid4(), _tomorrow(), " ", "TBD")

        assert exc_info.value.kind is ErrorKind.VALIDATION


class TestScheduleLifecycle:
    """Test rescheduling and completion."""

    @pytest.mark.asyncio
    async def test_list_for_orders_sorted(self, scheduler) -> None:
        late, early = uuid4(), uuid4()
        await scheduler.create_schedule(late, _tomorrow() + timedelta(hours=5), "A", "TBD")
        await scheduler.create_schedule(early, _tomorrow(), "B", "TBD")

        schedules = await scheduler.list_for_orders([late, early, uuid4()])

        assert [s.order_id for s in schedules] == [early, late]

    @pytest.mark.asyncio
    async def test_update_delivery_time(self, scheduler) -> None:
        order_id = uuid4()
        await scheduler.create_schedule(order_id, _tomorrow(), "A", "TBD")
        new_time = _tomorrow() + timedelta(days=1)

        updated = await scheduler.update_delivery_time(order_id, new_time)

        assert updated.delivery_time == new_time

    @pytest.mark.asyncio
    async def test_mark_completed_once(self, scheduler) -> None:
        order_id = uuid4()
        await scheduler.create_schedule(order_id, _tomorrow(), "A", "TBD")

        await scheduler.mark_completed(order_id)
        assert (await scheduler.get_for_order(order_id)).is_completed

        with pytest.raises(OrderingError) as exc_info:
            await scheduler.mark_completed(order_id)
        assert exc_info.value.kind is ErrorKind.INVALID_STATE_TRANSITION

        with pytest.raises(OrderingError) as exc_info:
            await scheduler.update_delivery_time(order_id, _tomorrow())
        assert exc_info.value.kind is ErrorKind.INVALID_STATE_TRANSITION

    @pytest.mark.asyncio
    async def test_unknown_order(self, scheduler) -> None:
        with pytest.raises(OrderingError) as exc_info:
            await scheduler.mark_completed(uuid4())

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_cancel_allows_new_schedule(self, scheduler) -> None:
        order_id = uuid4()
        first_id = await scheduler.create_schedule(order_id, _tomorrow(), "A", "TBD")

        await scheduler.cancel_schedule(order_id)
        assert await scheduler.get_for_order(order_id) is None

        second_id = await scheduler.create_schedule(order_id, _tomorrow(), "A", "TBD")
        assert second_id != first_id

    @pytest.mark.asyncio
    async def test_cancel_missing_is_noop(self, scheduler) -> None:
        await scheduler.cancel_schedule(uuid4())

    @pytest.mark.asyncio
    async def test_cancel_completed_rejected(self, scheduler) -> None:
        order_id = uuid4()
        await scheduler.create_schedule(order_id, _tomorrow(), "A", "TBD")
        await scheduler.mark_completed(order_id)

        with pytest.raises(OrderingError) as exc_info:
            await scheduler.cancel_schedule(order_id)

        assert exc_info.value.kind is ErrorKind.INVALID_STATE_TRANSITION
        assert (await scheduler.get_for_order(order_id)).is_completed
