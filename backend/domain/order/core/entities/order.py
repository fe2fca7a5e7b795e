"""Order aggregate root - an account's purchase of menu offerings."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID, uuid4

from domain.order.core.events import (
    OrderConfirmed,
    OrderCreated,
    OrderDelivered,
    OrderPaymentFailed,
    PaymentMethodSelected,
)
from domain.order.core.exceptions.ordering_errors import OrderingError
from domain.order.core.value_objects.money import ZERO, sum_money, to_money
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.payment_method import PaymentMethod

from .order_line import OrderLine


@dataclass
class Order:
    """
    Aggregate Root: Order with its lines.

    Example:
        Order for account "acc-1"
        ├─ OrderLine 1 = offering A, 2 x 4.00
        └─ OrderLine 2 = offering B, 1 x 10.00
        total_amount = 18.00

    Invariants:
    - At least one line
    - total_amount equals the exact sum of line totals
    - Status only moves along the OrderStatus transition table
    - A gateway order never confirms once its rollback has started

    Business rule violations (wrong status, wrong method) raise
    OrderingError; structural corruption raises ValueError.

    Identity: Defined by unique ID (UUID)
    """

    id: UUID
    account_id: str
    ordered_at: datetime
    lines: List[OrderLine] = field(default_factory=list)

    status: OrderStatus = OrderStatus.PENDING
    payment_method: Optional[PaymentMethod] = None
    total_amount: Decimal = ZERO

    # Payment confirmation
    payment_confirmed_at: Optional[datetime] = None
    payment_confirmed_by: Optional[str] = None
    gateway_transaction_id: Optional[str] = None

    # Delivery
    delivery_schedule_id: Optional[str] = None
    delivery_address: Optional[str] = None
    delivery_contact: Optional[str] = None

    # Revision of the stored copy, bumped by the repository on every save
    version: int = 0

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    _events: List[Any] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        if not self.account_id or not self.account_id.strip():
            raise ValueError("account_id cannot be empty")

        if self.ordered_at.tzinfo is None:
            raise ValueError("ordered_at must be timezone-aware (use UTC)")

        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (use UTC)")

        if self.updated_at.tzinfo is None:
            raise ValueError("updated_at must be timezone-aware (use UTC)")

        self.total_amount = to_money(self.total_amount)

    @classmethod
    def create(
        cls,
        account_id: str,
        lines: List[OrderLine],
        order_id: Optional[UUID] = None,
        delivery_address: Optional[str] = None,
        delivery_contact: Optional[str] = None,
    ) -> "Order":
        """
        Place a new order from already-reserved lines.

        Args:
            account_id: Owning account
            lines: Lines whose stock has been reserved
            order_id: Optional explicit ID (generated otherwise)
            delivery_address: Optional address for the delivery schedule
            delivery_contact: Optional contact for the delivery schedule

        Returns:
            Order in status "pending" with OrderCreated recorded

        Raises:
            ValueError: If lines is empty
        """
        if not lines:
            raise ValueError("Order must have at least one line")

        now = datetime.now(timezone.utc)
        order = cls(
            id=order_id or uuid4(),
            account_id=account_id,
            ordered_at=now,
            lines=list(lines),
            total_amount=sum_money(line.line_total for line in lines),
            delivery_address=delivery_address,
            delivery_contact=delivery_contact,
            created_at=now,
            updated_at=now,
        )
        order._record_event(
            OrderCreated.create(
                order_id=order.id,
                account_id=account_id,
                line_count=len(order.lines),
                total_amount=order.total_amount,
            )
        )
        return order

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def select_payment_method(self, method: PaymentMethod) -> None:
        """
        Record the payment method and start waiting for payment.

        Raises:
            OrderingError: INVALID_STATE_TRANSITION unless status is "pending"
        """
        if self.status != OrderStatus.PENDING:
            raise OrderingError.invalid_transition(
                self.id,
                f"Cannot process payment for order with status: {self.status.value}",
                status=self.status.value,
            )

        self.payment_method = method
        self._transition(OrderStatus.PENDING_PAYMENT)
        self._record_event(
            PaymentMethodSelected.create(order_id=self.id, payment_method=method.value)
        )

    def ensure_cash_confirmable(self) -> None:
        """
        Raises:
            OrderingError: INVALID_STATE_TRANSITION if not a COD order
                awaiting payment
        """
        if self.payment_method != PaymentMethod.COD:
            raise OrderingError.invalid_transition(
                self.id,
                "Cannot confirm payment: order is not a Cash on Delivery order",
                status=self.status.value,
            )
        if self.status != OrderStatus.PENDING_PAYMENT:
            raise OrderingError.invalid_transition(
                self.id,
                f"Cannot confirm payment for order with status: {self.status.value}",
                status=self.status.value,
            )

    def confirm_cash_payment(self, confirmed_by: str, delivery_schedule_id: str) -> None:
        """
        Confirm a cash-on-delivery payment.

        Args:
            confirmed_by: Delivery agent / party confirming receipt of cash
            delivery_schedule_id: Schedule created for this order

        Raises:
            OrderingError: INVALID_STATE_TRANSITION (see ensure_cash_confirmable)
        """
        self.ensure_cash_confirmable()

        self.payment_confirmed_at = datetime.now(timezone.utc)
        self.payment_confirmed_by = confirmed_by
        self.delivery_schedule_id = delivery_schedule_id
        self._transition(OrderStatus.CONFIRMED)
        self._record_event(
            OrderConfirmed.create(
                order_id=self.id,
                payment_method=PaymentMethod.COD.value,
                delivery_schedule_id=delivery_schedule_id,
                confirmed_by=confirmed_by,
            )
        )

    def ensure_awaiting_gateway_payment(self) -> None:
        """
        Raises:
            OrderingError: INVALID_STATE_TRANSITION unless this is a gateway
                order still in "pending_payment"
        """
        if self.status != OrderStatus.PENDING_PAYMENT:
            raise OrderingError.invalid_transition(
                self.id,
                f"Cannot apply gateway callback to order with status: {self.status.value}",
                status=self.status.value,
            )
        if self.payment_method != PaymentMethod.GATEWAY:
            raise OrderingError.invalid_transition(
                self.id,
                "Cannot apply gateway callback: order is not a gateway order",
                status=self.status.value,
            )

    def ensure_gateway_confirmable(self) -> None:
        """
        Raises:
            OrderingError: INVALID_STATE_TRANSITION unless awaiting gateway
                payment with every reservation still held
        """
        self.ensure_awaiting_gateway_payment()

        released = len(self.lines) - len(self.outstanding_lines())
        if released:
            raise OrderingError.invalid_transition(
                self.id,
                "Cannot confirm payment: reservation rollback already started",
                status=self.status.value,
            )

    def confirm_gateway_payment(self, transaction_id: str, delivery_schedule_id: str) -> None:
        """Confirm payment after a successful gateway callback."""
        self.ensure_gateway_confirmable()

        self.gateway_transaction_id = transaction_id
        self.payment_confirmed_at = datetime.now(timezone.utc)
        self.delivery_schedule_id = delivery_schedule_id
        self._transition(OrderStatus.CONFIRMED)
        self._record_event(
            OrderConfirmed.create(
                order_id=self.id,
                payment_method=PaymentMethod.GATEWAY.value,
                delivery_schedule_id=delivery_schedule_id,
                transaction_id=transaction_id,
            )
        )

    def outstanding_lines(self) -> List[OrderLine]:
        """Lines whose reserved units have not been given back yet."""
        return [line for line in self.lines if not line.reservation_released]

    def mark_line_released(self, line_id: UUID) -> None:
        """
        Flag a line's reservation as returned to the ledger.

        Raises:
            ValueError: If the line is unknown or already released
        """
        for index, line in enumerate(self.lines):
            if line.id == line_id:
                if line.reservation_released:
                    raise ValueError(f"Line {line_id} already released")
                self.lines[index] = line.as_released()
                self.updated_at = datetime.now(timezone.utc)
                return
        raise ValueError(f"Line {line_id} not found in order {self.id}")

    def reopen_line(self, line_id: UUID) -> None:
        """
        Undo mark_line_released for a release that did not happen.

        Raises:
            ValueError: If the line is unknown or not marked released
        """
        for index, line in enumerate(self.lines):
            if line.id == line_id:
                if not line.reservation_released:
                    raise ValueError(f"Line {line_id} is not released")
                self.lines[index] = replace(line, reservation_released=False)
                self.updated_at = datetime.now(timezone.utc)
                return
        raise ValueError(f"Line {line_id} not found in order {self.id}")

    def mark_payment_failed(self, response_code: str, transaction_id: str) -> None:
        """
        Close the order after a declined gateway payment.

        Every line must already be released.

        Raises:
            OrderingError: INVALID_STATE_TRANSITION (see ensure_awaiting_gateway_payment)
            ValueError: If some reservation is still outstanding
        """
        self.ensure_awaiting_gateway_payment()

        if self.outstanding_lines():
            raise ValueError(
                f"Order {self.id} still holds reservations; release them before failing"
            )

        self.gateway_transaction_id = transaction_id
        self._transition(OrderStatus.PAYMENT_FAILED)
        self._record_event(
            OrderPaymentFailed.create(
                order_id=self.id,
                response_code=response_code,
                transaction_id=transaction_id,
                released_units=sum(line.quantity for line in self.lines),
            )
        )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def mark_delivered(self) -> None:
        """
        Raises:
            OrderingError: INVALID_STATE_TRANSITION unless status is "confirmed"
        """
        if self.status != OrderStatus.CONFIRMED:
            raise OrderingError.invalid_transition(
                self.id,
                f"Cannot complete delivery for order with status: {self.status.value}",
                status=self.status.value,
            )

        self._transition(OrderStatus.DELIVERED)
        self._record_event(OrderDelivered.create(order_id=self.id, account_id=self.account_id))

    # ------------------------------------------------------------------
    # Invariants and events
    # ------------------------------------------------------------------

    def validate_invariants(self) -> None:
        """
        Validate all order invariants.

        Raises:
            ValueError: If any invariant is violated
        """
        if not self.lines:
            raise ValueError(f"Order {self.id} has no lines")

        expected = sum_money(line.line_total for line in self.lines)
        if self.total_amount != expected:
            raise ValueError(
                f"Total amount mismatch for order {self.id}: {self.total_amount} != {expected}"
            )

        if self.status != OrderStatus.PENDING and self.payment_method is None:
            raise ValueError(f"Order {self.id} in status {self.status.value} has no payment method")

        if self.status in (OrderStatus.CONFIRMED, OrderStatus.DELIVERED):
            if self.payment_confirmed_at is None or self.delivery_schedule_id is None:
                raise ValueError(f"Confirmed order {self.id} lacks confirmation data")

        if self.status == OrderStatus.PAYMENT_FAILED and self.outstanding_lines():
            raise ValueError(f"Failed order {self.id} still holds reservations")

    def collect_events(self) -> List[Any]:
        """
        Collect and clear pending domain events.

        Returns:
            List of events recorded since the last collection
        """
        events = self._events.copy()
        self._events.clear()
        return events

    def _record_event(self, event: Any) -> None:
        self._events.append(event)

    def _transition(self, target: OrderStatus) -> None:
        if not self.status.can_transition_to(target):
            raise OrderingError.invalid_transition(
                self.id,
                f"Cannot move order from {self.status.value} to {target.value}",
                status=self.status.value,
            )
        self.status = target
        self.updated_at = datetime.now(timezone.utc)
