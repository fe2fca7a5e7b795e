"""Process payment command and handler.

Records how the customer will pay and moves the order to
"pending_payment". Gateway orders also get the URL the customer is
redirected to.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.gateway_client import IGatewayClient
from domain.order.core.ports.order_repository import IOrderRepository
from domain.order.core.value_objects.payment_method import PaymentMethod
from domain.shared.ports.event_bus import IEventBus

from ..locks import OrderLockRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessPaymentCommand:
    """
    Command: Select the payment method of a pending order.

    Attributes:
        order_id: Order to pay
        payment_method: "COD" or "GATEWAY" (exact match)
    """

    order_id: UUID
    payment_method: Optional[str]


@dataclass(frozen=True)
class PaymentProcessingResult:
    order: Order
    payment_url: Optional[str] = None


class ProcessPaymentCommandHandler:
    """Handler for ProcessPaymentCommand."""

    def __init__(
        self,
        repository: IOrderRepository,
        gateway: IGatewayClient,
        event_bus: IEventBus,
        locks: OrderLockRegistry,
    ):
        self._repository = repository
        self._gateway = gateway
        self._event_bus = event_bus
        self._locks = locks

    async def handle(self, command: ProcessPaymentCommand) -> PaymentProcessingResult:
        """
        Raises:
            OrderingError: INVALID_PAYMENT_METHOD, NOT_FOUND,
                INVALID_STATE_TRANSITION unless the order is "pending"
        """
        method = PaymentMethod.parse(command.payment_method)

        async with self._locks.hold(command.order_id):
            order = await self._repository.get_by_id(command.order_id)
            if order is None:
                raise OrderingError.not_found("Order", command.order_id)

            order.select_payment_method(method)

            payment_url = None
            if method is PaymentMethod.GATEWAY:
                payment_url = self._gateway.create_payment_url(
                    order.id, order.total_amount, f"Payment for order {order.id}"
                )

            await self._repository.save(order)

        logger.info(
            "Payment method selected",
            extra={"order_id": str(order.id), "payment_method": method.value},
        )

        for event in order.collect_events():
            await self._event_bus.publish(event)

        return PaymentProcessingResult(order=order, payment_url=payment_url)
