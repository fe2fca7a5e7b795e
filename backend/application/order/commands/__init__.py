"""CQRS Commands for the order domain."""

from .complete_delivery import CompleteDeliveryCommand, CompleteDeliveryCommandHandler
from .confirm_cash_payment import ConfirmCashPaymentCommand, ConfirmCashPaymentCommandHandler
from .create_order import CreateOrderCommand, CreateOrderCommandHandler, OrderItem
from .process_gateway_callback import (
    ProcessGatewayCallbackCommand,
    ProcessGatewayCallbackCommandHandler,
)
from .process_payment import (
    PaymentProcessingResult,
    ProcessPaymentCommand,
    ProcessPaymentCommandHandler,
)

__all__ = [
    "CompleteDeliveryCommand",
    "CompleteDeliveryCommandHandler",
    "ConfirmCashPaymentCommand",
    "ConfirmCashPaymentCommandHandler",
    "CreateOrderCommand",
    "CreateOrderCommandHandler",
    "OrderItem",
    "PaymentProcessingResult",
    "ProcessGatewayCallbackCommand",
    "ProcessGatewayCallbackCommandHandler",
    "ProcessPaymentCommand",
    "ProcessPaymentCommandHandler",
]
