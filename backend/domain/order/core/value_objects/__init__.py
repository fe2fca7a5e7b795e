"""Value objects for the order domain."""

from .money import CENTS, ZERO, sum_money, to_minor_units, to_money
from .order_status import OrderStatus
from .payment_method import PaymentMethod

__all__ = [
    "CENTS",
    "ZERO",
    "OrderStatus",
    "PaymentMethod",
    "sum_money",
    "to_minor_units",
    "to_money",
]
