"""Domain event handlers for the order domain."""

from .order_confirmed_handler import PaymentOutcomeHandler
from .order_delivered_handler import OrderDeliveredHandler

__all__ = ["OrderDeliveredHandler", "PaymentOutcomeHandler"]
