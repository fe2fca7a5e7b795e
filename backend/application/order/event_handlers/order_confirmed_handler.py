"""Handler for OrderConfirmed and OrderPaymentFailed domain events.

Side effects only: structured audit logging of payment outcomes.
"""

import logging

from domain.order.core.events.order_confirmed import OrderConfirmed
from domain.order.core.events.order_payment_failed import OrderPaymentFailed

logger = logging.getLogger(__name__)


class PaymentOutcomeHandler:
    """Logs payment outcomes; does NOT modify system state."""

    async def on_confirmed(self, event: OrderConfirmed) -> None:
        logger.info(
            "order_confirmed",
            extra={
                **event.log_fields(),
                "order_id": str(event.order_id),
                "payment_method": event.payment_method,
                "delivery_schedule_id": event.delivery_schedule_id,
                "confirmed_by": event.confirmed_by,
                "transaction_id": event.transaction_id,
            },
        )

    async def on_payment_failed(self, event: OrderPaymentFailed) -> None:
        logger.warning(
            "order_payment_failed",
            extra={
                **event.log_fields(),
                "order_id": str(event.order_id),
                "response_code": event.response_code,
                "transaction_id": event.transaction_id,
                "released_units": event.released_units,
            },
        )
