"""OrderCreated domain event."""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from .base import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Domain event: an order was placed and its stock reserved.

    Attributes:
        order_id: ID of the new order.
        account_id: Owning account.
        line_count: Number of order lines.
        total_amount: Order total.

    Examples:
        >>> event = OrderCreated.create(
        ...     order_id=uuid4(),
        ...     account_id="acc-1",
        ...     line_count=2,
        ...     total_amount=Decimal("18.00"),
        ... )
        >>> event.line_count
        2
    """

    order_id: UUID
    account_id: str
    line_count: int
    total_amount: Decimal

    @classmethod
    def create(
        cls,
        order_id: UUID,
        account_id: str,
        line_count: int,
        total_amount: Decimal,
    ) -> "OrderCreated":
        """Create new OrderCreated event.

        Raises:
            ValueError: If line_count is not positive.
        """
        if line_count <= 0:
            raise ValueError(f"line_count must be positive, got {line_count}")

        return cls(
            event_id=uuid4(),
            occurred_at=datetime.now(timezone.utc),
            order_id=order_id,
            account_id=account_id,
            line_count=line_count,
            total_amount=total_amount,
        )
