"""Order status value object and its transition table."""

from enum import Enum
from typing import Dict, FrozenSet


class OrderStatus(str, Enum):
    """Lifecycle status of an order.

    Transitions:
        pending          -> pending_payment   (payment method selected)
        pending_payment  -> confirmed         (cash confirmed / gateway success)
        pending_payment  -> payment_failed    (gateway failure, terminal)
        confirmed        -> delivered         (delivery completed, terminal)
    """

    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    PAYMENT_FAILED = "payment_failed"
    DELIVERED = "delivered"

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PENDING_PAYMENT}),
    OrderStatus.PENDING_PAYMENT: frozenset(
        {OrderStatus.CONFIRMED, OrderStatus.PAYMENT_FAILED}
    ),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.PAYMENT_FAILED: frozenset(),
    OrderStatus.DELIVERED: frozenset(),
}
