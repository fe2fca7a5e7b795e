"""Payment gateway client port (interface)."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional, Protocol
from uuid import UUID

SUCCESS_RESPONSE_CODE = "00"


@dataclass(frozen=True)
class GatewayCallbackResult:
    """Outcome of validating a gateway callback.

    Attributes:
        is_valid: Signature and payload shape check passed
        order_id: Order referenced by the callback (None when invalid)
        response_code: Gateway response code ("00" means paid)
        transaction_id: Gateway-side transaction reference
        message: Human-readable description of the response code
    """

    is_valid: bool
    order_id: Optional[UUID]
    response_code: str
    transaction_id: str
    message: str

    @property
    def is_success(self) -> bool:
        return self.is_valid and self.response_code == SUCCESS_RESPONSE_CODE


class IGatewayClient(Protocol):
    """
    Interface for the external payment gateway.

    Implementations:
    - VnpayGatewayClient (HMAC-SHA512 signed redirect and callback)
    """

    def validate_callback(self, payload: Mapping[str, str]) -> GatewayCallbackResult:
        """
        Verify the integrity of a callback and extract its outcome.

        Never raises on bad input: an invalid payload yields
        ``GatewayCallbackResult(is_valid=False, ...)``.
        """
        ...

    def create_payment_url(self, order_id: UUID, amount: Decimal, order_info: str) -> str:
        """Build the signed URL that redirects the customer to the gateway."""
        ...
