"""Compensating releases of stock reservations.

There is no transaction spanning several offerings, so undoing a
reservation means releasing it again. Releases are retried on
infrastructure errors; business errors (OrderingError) are not retried.
"""

import logging
from typing import Awaitable, Callable, Iterable, Optional, Tuple
from uuid import UUID

from tenacity import (
    AsyncRetrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.order.core.entities.order import Order
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.inventory.ledger import InventoryLedger

logger = logging.getLogger(__name__)

Checkpoint = Callable[[Order], Awaitable[None]]


class ReservationCompensator:
    """
    Releases reservations back to the ledger with retry.

    Args:
        ledger: Inventory ledger
        max_attempts: Attempts per release (>= 1)
        backoff_s: Multiplier of the exponential wait between attempts
            (0 disables waiting)

    Example:
        >>> compensator = ReservationCompensator(ledger, max_attempts=3, backoff_s=0.5)
        >>> released = await compensator.release_order_lines(order, checkpoint=repository.save)
    """

    def __init__(self, ledger: InventoryLedger, max_attempts: int = 3, backoff_s: float = 0.5):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self._ledger = ledger
        self._max_attempts = max_attempts
        self._backoff_s = backoff_s

    async def release(self, offering_id: UUID, quantity: int) -> None:
        """
        Release one reservation, retrying infrastructure failures.

        Raises:
            OrderingError: Immediately, without retry
            Exception: The last infrastructure error once attempts run out
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._backoff_s, max=10),
            retry=retry_if_not_exception_type(OrderingError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        "Retrying stock release",
                        extra={
                            "offering_id": str(offering_id),
                            "quantity": quantity,
                            "attempt": attempt.retry_state.attempt_number,
                        },
                    )
                await self._ledger.release(offering_id, quantity)

    async def release_reservations(self, reservations: Iterable[Tuple[UUID, int]]) -> int:
        """
        Best-effort undo of reservations taken by an aborted operation.

        Every reservation is attempted even if an earlier one fails;
        failures are logged with the units left stranded.

        Returns:
            Number of units successfully released
        """
        released = 0
        for offering_id, quantity in reservations:
            try:
                await self.release(offering_id, quantity)
            except Exception as e:
                logger.error(
                    "Stock release failed, units stranded",
                    extra={
                        "offering_id": str(offering_id),
                        "quantity": quantity,
                        "error": str(e),
                    },
                    exc_info=True,
                )
                continue
            released += quantity
        return released

    async def release_order_lines(self, order: Order, checkpoint: Optional[Checkpoint] = None) -> int:
        """
        Release every outstanding line of an order.

        Each line is marked released and checkpointed before its units go
        back, so a concurrent rollback working on a stale copy of the order
        fails its own checkpoint instead of releasing the line again. A
        release that keeps failing is unmarked (and checkpointed) before
        the error is re-raised; a later call handles only the remaining
        lines.

        Args:
            order: Order whose reservations are returned
            checkpoint: Persists the order, raising if it changed meanwhile
                (typically the repository's save)

        Returns:
            Number of units released by this call
        """
        released = 0
        for line in order.outstanding_lines():
            order.mark_line_released(line.id)
            if checkpoint is not None:
                await checkpoint(order)

            try:
                await self.release(line.offering_id, line.quantity)
            except BaseException:
                order.reopen_line(line.id)
                if checkpoint is not None:
                    await self._checkpoint_reopened(order, line.offering_id, line.quantity, checkpoint)
                raise

            released += line.quantity

        logger.info(
            "Order reservations released",
            extra={"order_id": str(order.id), "released_units": released},
        )
        return released

    @staticmethod
    async def _checkpoint_reopened(
        order: Order, offering_id: UUID, quantity: int, checkpoint: Checkpoint
    ) -> None:
        try:
            await checkpoint(order)
        except Exception as e:
            # The stored copy still claims the line; its units stay reserved.
            logger.error(
                "Could not reopen order line, units stranded",
                extra={
                    "order_id": str(order.id),
                    "offering_id": str(offering_id),
                    "quantity": quantity,
                    "error": str(e),
                },
            )
