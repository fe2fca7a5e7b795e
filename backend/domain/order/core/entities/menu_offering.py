"""MenuOffering entity - a recipe sold on one day's menu with finite stock."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from domain.order.core.value_objects.money import to_money


@dataclass
class MenuOffering:
    """
    Entity: Sellable menu item for a calendar day.

    Created when a menu is published. Its quantity is mutated only
    through reserve/release; price and recipe are read-only here.

    Invariants:
    - available_quantity >= 0
    - unit_price >= 0, two fraction digits

    Identity: Defined by unique ID (UUID)
    """

    id: UUID
    menu_id: UUID
    recipe_id: UUID
    recipe_name: str
    menu_date: date
    unit_price: Decimal
    available_quantity: int

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        self.unit_price = to_money(self.unit_price)

        if self.unit_price < 0:
            raise ValueError(f"Price cannot be negative, got {self.unit_price}")

        if isinstance(self.available_quantity, bool) or not isinstance(
            self.available_quantity, int
        ):
            raise ValueError(
                f"available_quantity must be an integer, got {self.available_quantity!r}"
            )

        if self.available_quantity < 0:
            raise ValueError(
                f"available_quantity cannot be negative, got {self.available_quantity}"
            )

        if self.created_at.tzinfo is None or self.updated_at.tzinfo is None:
            raise ValueError("Timestamps must be timezone-aware (use UTC)")

    @classmethod
    def publish(
        cls,
        menu_id: UUID,
        recipe_id: UUID,
        recipe_name: str,
        menu_date: date,
        unit_price: Decimal,
        quantity: int,
        offering_id: Optional[UUID] = None,
    ) -> "MenuOffering":
        """Create a new offering for a published menu."""
        return cls(
            id=offering_id or uuid4(),
            menu_id=menu_id,
            recipe_id=recipe_id,
            recipe_name=recipe_name,
            menu_date=menu_date,
            unit_price=unit_price,
            available_quantity=quantity,
        )

    @property
    def is_sold_out(self) -> bool:
        return self.available_quantity == 0

    def can_reserve(self, quantity: int) -> bool:
        return 0 < quantity <= self.available_quantity

    def reserve(self, quantity: int) -> None:
        """
        Take units out of stock.

        Callers must hold the store's per-offering lock; this method is
        the check-and-decrement step itself.

        Raises:
            ValueError: If quantity is not positive or exceeds stock
        """
        if quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {quantity}")
        if quantity > self.available_quantity:
            raise ValueError(
                f"Cannot reserve {quantity}, only {self.available_quantity} available"
            )

        self.available_quantity -= quantity
        self.updated_at = datetime.now(timezone.utc)

    def release(self, quantity: int) -> None:
        """
        Put units back into stock.

        Raises:
            ValueError: If quantity is negative
        """
        if quantity < 0:
            raise ValueError(f"Quantity cannot be negative, got {quantity}")

        self.available_quantity += quantity
        self.updated_at = datetime.now(timezone.utc)
