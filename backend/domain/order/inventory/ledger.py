"""Inventory reservation ledger.

Tracks available quantity per menu offering and turns the offering
store's atomic primitives into business-level reserve/release with
typed errors.
"""

import logging
from decimal import Decimal
from uuid import UUID

from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.ports.offering_store import IOfferingStore

logger = logging.getLogger(__name__)


class InventoryLedger:
    """
    Domain service over IOfferingStore.

    Atomicity of a single reserve/release comes from the store; the
    ledger only decides which error to raise when the store refuses.

    Example:
        >>> ledger = InventoryLedger(store)
        >>> price = await ledger.reserve(offering_id, 3)
        >>> await ledger.release(offering_id, 3)
    """

    def __init__(self, store: IOfferingStore):
        self._store = store

    async def reserve(self, offering_id: UUID, quantity: int) -> Decimal:
        """
        Reserve quantity units of an offering.

        Returns:
            The offering's current unit price

        Raises:
            OrderingError: VALIDATION if quantity <= 0, NOT_FOUND if the
                offering does not exist, INSUFFICIENT_STOCK if fewer than
                quantity units are available (stock left unchanged)
        """
        if quantity <= 0:
            raise OrderingError.validation(
                f"Quantity must be greater than 0, got {quantity}",
                offering_id=str(offering_id),
                quantity=quantity,
            )

        offering = await self._store.try_decrement(offering_id, quantity)
        if offering is None:
            current = await self._store.get(offering_id)
            if current is None:
                raise OrderingError.not_found("MenuOffering", offering_id)
            raise OrderingError.insufficient_stock(
                offering_id, requested=quantity, available=current.available_quantity
            )

        logger.debug(
            "Stock reserved",
            extra={
                "offering_id": str(offering_id),
                "quantity": quantity,
                "available_quantity": offering.available_quantity,
            },
        )
        return offering.unit_price

    async def release(self, offering_id: UUID, quantity: int) -> None:
        """
        Give quantity units back to an offering.

        Callers must not release the same reservation twice.

        Raises:
            OrderingError: VALIDATION if quantity < 0, NOT_FOUND if the
                offering vanished
        """
        if quantity < 0:
            raise OrderingError.validation(
                f"Quantity cannot be negative, got {quantity}",
                offering_id=str(offering_id),
                quantity=quantity,
            )

        offering = await self._store.increment(offering_id, quantity)
        if offering is None:
            logger.error(
                "Cannot release stock of missing offering",
                extra={"offering_id": str(offering_id), "quantity": quantity},
            )
            raise OrderingError.not_found("MenuOffering", offering_id)

        logger.debug(
            "Stock released",
            extra={
                "offering_id": str(offering_id),
                "quantity": quantity,
                "available_quantity": offering.available_quantity,
            },
        )

    async def available(self, offering_id: UUID) -> int:
        """
        Raises:
            OrderingError: NOT_FOUND if the offering does not exist
        """
        offering = await self._store.get(offering_id)
        if offering is None:
            raise OrderingError.not_found("MenuOffering", offering_id)
        return offering.available_quantity
