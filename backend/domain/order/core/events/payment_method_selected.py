"""PaymentMethodSelected domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class PaymentMethodSelected(DomainEvent):
    """Domain event: the customer chose how to pay and the order awaits payment.

    Attributes:
        order_id: ID of the order.
        payment_method: "COD" or "GATEWAY".
    """

    order_id: UUID
    payment_method: str

    @classmethod
    def create(cls, order_id: UUID, payment_method: str) -> "PaymentMethodSelected":
        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            order_id=order_id,
            payment_method=payment_method,
        )
