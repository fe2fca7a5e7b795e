"""Payment gateway adapters."""

from infrastructure.payment.models import VnpayCallbackPayload
from infrastructure.payment.vnpay_client import VnpayGatewayClient

__all__ = ["VnpayCallbackPayload", "VnpayGatewayClient"]
