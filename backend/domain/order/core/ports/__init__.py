"""Ports of the order core domain (interfaces for infrastructure adapters)."""

from .account_store import IAccountStore
from .delivery_scheduler import IDeliveryScheduler
from .gateway_client import SUCCESS_RESPONSE_CODE, GatewayCallbackResult, IGatewayClient
from .offering_store import IOfferingStore
from .order_repository import IOrderRepository

__all__ = [
    "SUCCESS_RESPONSE_CODE",
    "GatewayCallbackResult",
    "IAccountStore",
    "IDeliveryScheduler",
    "IGatewayClient",
    "IOfferingStore",
    "IOrderRepository",
]
