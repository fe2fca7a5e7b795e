"""Order orchestrators."""

from .payment_coordinator import DeliveryDefaults, PaymentCoordinator

__all__ = ["DeliveryDefaults", "PaymentCoordinator"]
