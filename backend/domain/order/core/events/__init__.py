"""Domain events for the order core domain.

Events represent facts that have occurred in the domain.
All events are immutable and have unique identifiers.
"""

from .base import DomainEvent
from .order_confirmed import OrderConfirmed
from .order_created import OrderCreated
from .order_delivered import OrderDelivered
from .order_payment_failed import OrderPaymentFailed
from .payment_method_selected import PaymentMethodSelected

__all__ = [
    "DomainEvent",
    "OrderConfirmed",
    "OrderCreated",
    "OrderDelivered",
    "OrderPaymentFailed",
    "PaymentMethodSelected",
]
