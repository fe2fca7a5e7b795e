"""Currency helpers.

Amounts are ``Decimal`` values with two fraction digits. Rounding happens
once, when a price enters the domain; products and sums of normalised
amounts are then exact.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

AmountLike = Union[Decimal, int, str]


def to_money(value: AmountLike) -> Decimal:
    """Normalise a value to a two-digit currency amount.

    Floats are rejected to avoid binary rounding artefacts.

    Examples:
        >>> to_money("5")
        Decimal('5.00')
        >>> to_money(Decimal("4.005"))
        Decimal('4.01')

    Raises:
        ValueError: If value is a float or not a number.
    """
    if isinstance(value, float):
        raise ValueError(f"Use Decimal or str for money, got float {value!r}")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid money amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid money amount: {value!r}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts starting from a two-digit zero."""
    total = ZERO
    for amount in amounts:
        total += amount
    return total


def to_minor_units(amount: Decimal) -> int:
    """Convert an amount to integer minor units (cents).

    Examples:
        >>> to_minor_units(Decimal("15.00"))
        1500
    """
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
