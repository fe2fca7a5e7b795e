"""OrderPaymentFailed domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class OrderPaymentFailed(DomainEvent):
    """Domain event: the gateway declined payment and stock was restored.

    Attributes:
        order_id: ID of the failed order.
        response_code: Gateway response code.
        transaction_id: Gateway transaction reference.
        released_units: Total units given back to the ledger.
    """

    order_id: UUID
    response_code: str
    transaction_id: str
    released_units: int

    @classmethod
    def create(
        cls,
        order_id: UUID,
        response_code: str,
        transaction_id: str,
        released_units: int,
    ) -> "OrderPaymentFailed":
        """Create new OrderPaymentFailed event.

        Raises:
            ValueError: If released_units is negative.
        """
        if released_units < 0:
            raise ValueError(f"released_units cannot be negative, got {released_units}")

        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            order_id=order_id,
            response_code=response_code,
            transaction_id=transaction_id,
            released_units=released_units,
        )
