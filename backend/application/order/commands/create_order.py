"""Create order command and handler.

Placing an order reserves stock for every item before anything is
persisted. A failure part-way gives back the reservations already taken.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.order.core.entities.order_line import OrderLine
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.account_store import IAccountStore
from domain.order.core.ports.order_repository import IOrderRepository
from domain.order.inventory.ledger import InventoryLedger
from domain.shared.ports.event_bus import IEventBus

from ..compensation import ReservationCompensator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderItem:
    """Requested quantity of one menu offering."""

    offering_id: UUID
    quantity: int


@dataclass(frozen=True)
class CreateOrderCommand:
    """
    Command: Place an order.

    Attributes:
        account_id: Ordering account
        items: Offerings and quantities (at least one)
        delivery_address: Optional address used when scheduling delivery
        delivery_contact: Optional contact used when scheduling delivery
    """

    account_id: str
    items: List[OrderItem]
    delivery_address: Optional[str] = None
    delivery_contact: Optional[str] = None


class CreateOrderCommandHandler:
    """Handler for CreateOrderCommand."""

    def __init__(
        self,
        repository: IOrderRepository,
        account_store: IAccountStore,
        ledger: InventoryLedger,
        compensator: ReservationCompensator,
        event_bus: IEventBus,
    ):
        self._repository = repository
        self._accounts = account_store
        self._ledger = ledger
        self._compensator = compensator
        self._event_bus = event_bus

    async def handle(self, command: CreateOrderCommand) -> Order:
        """
        Execute create command.

        Flow:
        1. Validate items (non-empty, positive quantities)
        2. Check the account exists
        3. Reserve each item, capturing its current unit price
        4. Build and persist the order (status "pending")
        5. Publish OrderCreated

        Raises:
            OrderingError: VALIDATION, NOT_FOUND (account or offering),
                INSUFFICIENT_STOCK. Reservations taken before the failure
                are released first.
        """
        if not command.items:
            raise OrderingError.validation("Order must contain at least one item")

        for item in command.items:
            if item.quantity <= 0:
                raise OrderingError.validation(
                    f"Quantity must be greater than 0 for offering {item.offering_id}",
                    offering_id=str(item.offering_id),
                    quantity=item.quantity,
                )

        if not await self._accounts.account_exists(command.account_id):
            raise OrderingError.not_found("Account", command.account_id)

        logger.info(
            "Creating order",
            extra={"account_id": command.account_id, "item_count": len(command.items)},
        )

        lines: List[OrderLine] = []
        try:
            for item in command.items:
                unit_price = await self._ledger.reserve(item.offering_id, item.quantity)
                lines.append(OrderLine.create(item.offering_id, item.quantity, unit_price))

            order = Order.create(
                account_id=command.account_id,
                lines=lines,
                delivery_address=command.delivery_address,
                delivery_contact=command.delivery_contact,
            )
            await self._repository.save(order)
        except BaseException as e:
            # Includes cancellation of the request mid-loop
            if lines:
                logger.warning(
                    "Order creation aborted, releasing reservations",
                    extra={
                        "account_id": command.account_id,
                        "reserved_lines": len(lines),
                        "error": str(e),
                    },
                )
                await self._compensator.release_reservations(
                    (line.offering_id, line.quantity) for line in lines
                )
            raise

        logger.info(
            "Order created",
            extra={
                "order_id": str(order.id),
                "account_id": order.account_id,
                "total_amount": str(order.total_amount),
            },
        )

        for event in order.collect_events():
            await self._event_bus.publish(event)

        return order
