"""Payment method value object."""

from enum import Enum
from typing import Optional

from domain.order.core.exceptions.ordering_errors import OrderingError


class PaymentMethod(str, Enum):
    """Supported payment methods.

    COD: cash on delivery, confirmed by the delivery agent.
    GATEWAY: third-party payment provider, confirmed by callback.
    """

    COD = "COD"
    GATEWAY = "GATEWAY"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "PaymentMethod":
        """Parse a caller-supplied method name (exact match).

        Raises:
            OrderingError: INVALID_PAYMENT_METHOD if missing, blank or unknown.

        Examples:
            >>> PaymentMethod.parse("COD")
            <PaymentMethod.COD: 'COD'>
        """
        allowed = [m.value for m in cls]
        if raw is None or raw not in allowed:
            raise OrderingError.invalid_payment_method(raw, allowed)
        return cls(raw)
