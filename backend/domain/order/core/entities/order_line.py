"""OrderLine entity - one menu offering bought within an order."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from domain.order.core.value_objects.money import to_money


@dataclass(frozen=True)
class OrderLine:
    """
    Entity: Single line of an order.

    The unit price is captured when the order is created and never
    changes afterwards, even if the offering is repriced. The line also
    records whether its reserved units were given back to the ledger,
    so a rollback restores each line exactly once.

    Identity: Defined by unique ID (UUID)
    Mutability: Immutable; state changes produce a new instance
    """

    id: UUID
    offering_id: UUID
    quantity: int
    unit_price: Decimal
    reservation_released: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Quantity must be an integer, got {self.quantity!r}")

        if self.quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")

        price = to_money(self.unit_price)
        if price < 0:
            raise ValueError(f"Unit price cannot be negative, got {price}")
        object.__setattr__(self, "unit_price", price)

        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (use UTC)")

    @classmethod
    def create(cls, offering_id: UUID, quantity: int, unit_price: Decimal) -> "OrderLine":
        return cls(id=uuid4(), offering_id=offering_id, quantity=quantity, unit_price=unit_price)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    def as_released(self) -> "OrderLine":
        """Copy of this line with its reservation marked as given back."""
        return replace(self, reservation_released=True)
