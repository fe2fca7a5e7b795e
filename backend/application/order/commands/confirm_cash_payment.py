"""Confirm cash payment command and handler."""

from dataclasses import dataclass
from uuid import UUID

from domain.order.core.entities.order import Order
from domain.shared.ports.event_bus import IEventBus
from ..orchestrators.payment_coordinator import PaymentCoordinator


@dataclass(frozen=True)
class ConfirmCashPaymentCommand:
    """
    Command: A delivery agent confirms the cash of a COD order.

    Attributes:
        order_id: COD order awaiting payment
        confirming_party_id: Who received the cash
    """

    order_id: UUID
    confirming_party_id: str


class ConfirmCashPaymentCommandHandler:
    """Handler for ConfirmCashPaymentCommand."""

    def __init__(self, coordinator: PaymentCoordinator, event_bus: IEventBus):
        self._coordinator = coordinator
        self._event_bus = event_bus

    async def handle(self, command: ConfirmCashPaymentCommand) -> Order:
        order = await self._coordinator.confirm_cash_payment(
            command.order_id, command.confirming_party_id
        )
        for event in order.collect_events():
            await self._event_bus.publish(event)
        return order
