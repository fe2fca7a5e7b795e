"""OrderDelivered domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID, uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class OrderDelivered(DomainEvent):
    """Domain event: the order reached the customer.

    Attributes:
        order_id: ID of the delivered order.
        account_id: Owning account.
    """

    order_id: UUID
    account_id: str

    @classmethod
    def create(cls, order_id: UUID, account_id: str) -> "OrderDelivered":
        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            order_id=order_id,
            account_id=account_id,
        )
