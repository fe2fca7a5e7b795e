"""Process gateway callback command and handler."""

from dataclasses import dataclass, field
from typing import Dict

from domain.order.core.entities.order import Order
from domain.shared.ports.event_bus import IEventBus
from ..orchestrators.payment_coordinator import PaymentCoordinator


@dataclass(frozen=True)
class ProcessGatewayCallbackCommand:
    """
    Command: Apply a payment gateway notification.

    Attributes:
        payload: Raw callback parameters as received (query string)
    """

    payload: Dict[str, str] = field(default_factory=dict)


class ProcessGatewayCallbackCommandHandler:
    """Handler for ProcessGatewayCallbackCommand.

    A replayed callback returns the order as stored and publishes nothing.
    """

    def __init__(self, coordinator: PaymentCoordinator, event_bus: IEventBus):
        self._coordinator = coordinator
        self._event_bus = event_bus

    async def handle(self, command: ProcessGatewayCallbackCommand) -> Order:
        order = await self._coordinator.process_gateway_callback(command.payload)
        for event in order.collect_events():
            await self._event_bus.publish(event)
        return order
