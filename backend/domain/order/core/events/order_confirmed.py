"""OrderConfirmed domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class OrderConfirmed(DomainEvent):
    """Domain event: payment for an order was confirmed.

    Raised both for cash-on-delivery confirmation by a delivery agent
    and for a successful gateway callback.

    Attributes:
        order_id: ID of the confirmed order.
        payment_method: "COD" or "GATEWAY".
        delivery_schedule_id: Schedule created for the order.
        confirmed_by: Confirming party (COD only).
        transaction_id: Gateway transaction (GATEWAY only).
    """

    order_id: UUID
    payment_method: str
    delivery_schedule_id: str
    confirmed_by: Optional[str] = None
    transaction_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        order_id: UUID,
        payment_method: str,
        delivery_schedule_id: str,
        confirmed_by: Optional[str] = None,
        transaction_id: Optional[str] = None,
    ) -> "OrderConfirmed":
        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            order_id=order_id,
            payment_method=payment_method,
            delivery_schedule_id=delivery_schedule_id,
            confirmed_by=confirmed_by,
            transaction_id=transaction_id,
        )
