"""Payment coordinator.

Drives an order from "pending_payment" to its outcome: cash-on-delivery
confirmation, gateway success, or gateway failure with the stock
reservations rolled back. Successful payments get a delivery schedule.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.delivery_scheduler import IDeliveryScheduler
from domain.order.core.ports.gateway_client import GatewayCallbackResult, IGatewayClient
from domain.order.core.ports.order_repository import IOrderRepository
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.ports.idempotency_cache import IIdempotencyCache

from ..compensation import ReservationCompensator
from ..locks import OrderLockRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryDefaults:
    """How the delivery schedule of a confirmed order is filled in."""

    lead_time: timedelta = timedelta(hours=24)
    address: str = "Customer address"
    contact: str = "TBD"


class PaymentCoordinator:
    """
    Orchestrate payment confirmation and rollback.

    Every operation runs under the order's lock, so two callbacks (or a
    callback and a cash confirmation) for the same order never
    interleave within a process. Across processes the repository's
    versioned save decides: a worker holding a stale copy gets CONFLICT
    before it releases any stock. Gateway callbacks are idempotent per
    (order, transaction).

    Returned orders still carry their pending domain events; publishing
    them is left to the calling command handler.

    Example:
        >>> coordinator = PaymentCoordinator(repository, compensator, scheduler,
        ...                                  gateway, idempotency_cache, locks)
        >>> order = await coordinator.confirm_cash_payment(order_id, "driver-7")
        >>> order = await coordinator.process_gateway_callback(query_params)
    """

    def __init__(
        self,
        repository: IOrderRepository,
        compensator: ReservationCompensator,
        scheduler: IDeliveryScheduler,
        gateway: IGatewayClient,
        idempotency_cache: IIdempotencyCache,
        locks: OrderLockRegistry,
        delivery_defaults: Optional[DeliveryDefaults] = None,
        callback_ttl_seconds: int = 86400,
    ):
        self._repository = repository
        self._compensator = compensator
        self._scheduler = scheduler
        self._gateway = gateway
        self._idempotency_cache = idempotency_cache
        self._locks = locks
        self._delivery = delivery_defaults or DeliveryDefaults()
        self._callback_ttl_seconds = callback_ttl_seconds

    async def confirm_cash_payment(self, order_id: UUID, confirming_party_id: str) -> Order:
        """
        Confirm receipt of cash for a COD order.

        Raises:
            OrderingError: VALIDATION on a blank confirming party, NOT_FOUND,
                INVALID_STATE_TRANSITION if the order is not a COD order
                awaiting payment
            Exception: Error of the final save; the delivery schedule is
                cancelled first, so the call can be retried
        """
        if not confirming_party_id or not confirming_party_id.strip():
            raise OrderingError.validation("Confirming party is required")

        async with self._locks.hold(order_id):
            order = await self._load(order_id)
            order.ensure_cash_confirmable()

            schedule_id = await self._schedule_delivery(order)
            order.confirm_cash_payment(confirming_party_id, schedule_id)
            await self._save_confirmed(order)

        logger.info(
            "Cash payment confirmed",
            extra={
                "order_id": str(order.id),
                "confirmed_by": confirming_party_id,
                "delivery_schedule_id": schedule_id,
            },
        )
        return order

    async def process_gateway_callback(self, payload: Mapping[str, str]) -> Order:
        """
        Apply a gateway callback to its order.

        Flow:
        1. Validate signature and payload (gateway client)
        2. Under the order lock, return the order unchanged on a replay
        3. Success code: confirm and schedule delivery, unless a rollback
           has already released part of the stock
        4. Other codes: release outstanding reservations, then fail the order

        Raises:
            OrderingError: INVALID_CALLBACK, NOT_FOUND, INVALID_STATE_TRANSITION
                for a late callback of another transaction, CONFLICT if
                another worker changed the order meanwhile
            Exception: Infrastructure error of a release that kept failing;
                the order is saved with its partial release marks first
        """
        result = self._gateway.validate_callback(payload)
        if not result.is_valid or result.order_id is None:
            error = OrderingError.invalid_callback(result.message)
            logger.warning("Gateway callback rejected", extra=error.to_dict())
            raise error

        order_id = result.order_id
        key = self._callback_key(result)

        async with self._locks.hold(order_id):
            if await self._idempotency_cache.get(key) is not None:
                logger.info("Gateway callback replay ignored", extra={"order_id": str(order_id), "key": key})
                return await self._load(order_id)

            order = await self._load(order_id)

            if self._already_settled_by(order, result):
                logger.info("Gateway callback replay ignored", extra={"order_id": str(order_id), "key": key})
                await self._idempotency_cache.set(key, order.id, self._callback_ttl_seconds)
                return order

            if result.is_success:
                order.ensure_gateway_confirmable()
                schedule_id = await self._schedule_delivery(order)
                order.confirm_gateway_payment(result.transaction_id, schedule_id)
                await self._save_confirmed(order)
            else:
                order.ensure_awaiting_gateway_payment()
                await self._roll_back(order, result)
                await self._repository.save(order)

            await self._idempotency_cache.set(key, order.id, self._callback_ttl_seconds)

        logger.info(
            "Gateway callback applied",
            extra={
                "order_id": str(order.id),
                "status": order.status.value,
                "response_code": result.response_code,
                "transaction_id": result.transaction_id,
                "gateway_message": result.message,
            },
        )
        return order

    async def _roll_back(self, order: Order, result: GatewayCallbackResult) -> None:
        # Release marks are persisted line by line, so the stored order
        # already reflects any partial rollback when this raises.
        try:
            await self._compensator.release_order_lines(order, checkpoint=self._repository.save)
        except Exception as e:
            logger.error(
                "Rollback interrupted, order kept awaiting payment",
                extra={
                    "order_id": str(order.id),
                    "outstanding_lines": len(order.outstanding_lines()),
                    "error": str(e),
                },
            )
            raise

        order.mark_payment_failed(result.response_code, result.transaction_id)

    async def _save_confirmed(self, order: Order) -> None:
        """Persist a confirmation, dropping its schedule if the save fails."""
        try:
            await self._repository.save(order)
        except BaseException as e:
            logger.warning(
                "Confirmation not persisted, cancelling delivery schedule",
                extra={"order_id": str(order.id), "error": str(e)},
            )
            await self._cancel_schedule(order)
            raise

    async def _cancel_schedule(self, order: Order) -> None:
        try:
            await self._scheduler.cancel_schedule(order.id)
        except Exception as e:
            logger.error(
                "Delivery schedule left without a confirmed order",
                extra={
                    "order_id": str(order.id),
                    "delivery_schedule_id": order.delivery_schedule_id,
                    "error": str(e),
                },
            )

    async def _schedule_delivery(self, order: Order) -> str:
        return await self._scheduler.create_schedule(
            order.id,
            datetime.now(timezone.utc) + self._delivery.lead_time,
            order.delivery_address or self._delivery.address,
            order.delivery_contact or self._delivery.contact,
        )

    async def _load(self, order_id: UUID) -> Order:
        order = await self._repository.get_by_id(order_id)
        if order is None:
            raise OrderingError.not_found("Order", order_id)
        return order

    @staticmethod
    def _callback_key(result: GatewayCallbackResult) -> str:
        return f"gateway-callback:{result.order_id}:{result.transaction_id}"

    @staticmethod
    def _already_settled_by(order: Order, result: GatewayCallbackResult) -> bool:
        # The cache is process-local; the order itself remembers its transaction.
        if order.gateway_transaction_id != result.transaction_id:
            return False
        if result.is_success:
            return order.status in (OrderStatus.CONFIRMED, OrderStatus.DELIVERED)
        return order.status == OrderStatus.PAYMENT_FAILED
