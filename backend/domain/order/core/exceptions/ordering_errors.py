"""Error type for the Order bounded context.

A single exception carries a discriminant (ErrorKind) plus structured
context, so callers branch on ``error.kind`` instead of on a class tree.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Kinds of business-rule violations raised by the ordering core."""

    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_PAYMENT_METHOD = "INVALID_PAYMENT_METHOD"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    INVALID_CALLBACK = "INVALID_CALLBACK"
    VALIDATION = "VALIDATION"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    CONFLICT = "CONFLICT"


class OrderingError(Exception):
    """Recoverable business error of the ordering core.

    Attributes:
        kind: Discriminant of the failure
        entity: Name of the entity involved (e.g. "Order", "MenuOffering")
        entity_id: Identifier of the entity involved, as a string
        constraint: Name of the violated constraint, if any
        details: Additional structured context (requested/available, status...)

    Examples:
        >>> err = OrderingError.not_found("Order", "42")
        >>> err.kind is ErrorKind.NOT_FOUND
        True
        >>> str(err)
        'Order with ID 42 not found'
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.kind = kind
        self.message = message
        self.entity = entity
        self.entity_id = entity_id
        self.constraint = constraint
        self.details: Dict[str, Any] = dict(details or {})
        super().__init__(message)

    def __repr__(self) -> str:
        return f"OrderingError(kind={self.kind.value}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation, suitable for logging `extra` fields."""
        return {
            "kind": self.kind.value,
            "error": self.message,
            "entity": self.entity,
            "entity_id": self.entity_id,
            "constraint": self.constraint,
            "details": self.details,
        }

    # ------------------------------------------------------------------
    # Constructors, one per kind
    # ------------------------------------------------------------------

    @classmethod
    def not_found(cls, entity: str, entity_id: Any) -> "OrderingError":
        return cls(
            ErrorKind.NOT_FOUND,
            f"{entity} with ID {entity_id} not found",
            entity=entity,
            entity_id=str(entity_id),
        )

    @classmethod
    def insufficient_stock(
        cls, offering_id: Any, requested: int, available: int
    ) -> "OrderingError":
        return cls(
            ErrorKind.INSUFFICIENT_STOCK,
            (
                f"Insufficient quantity available for menu offering {offering_id}. "
                f"Available: {available}, Requested: {requested}"
            ),
            entity="MenuOffering",
            entity_id=str(offering_id),
            details={"requested": requested, "available": available},
        )

    @classmethod
    def invalid_payment_method(
        cls, method: Optional[str], allowed: List[str]
    ) -> "OrderingError":
        if method is None or not method.strip():
            message = "Payment method is required"
        else:
            message = (
                f"Invalid payment method: {method}. "
                f"Valid methods are: {', '.join(allowed)}"
            )
        return cls(
            ErrorKind.INVALID_PAYMENT_METHOD,
            message,
            details={"method": method, "allowed": list(allowed)},
        )

    @classmethod
    def invalid_transition(
        cls, order_id: Any, message: str, status: Optional[str] = None
    ) -> "OrderingError":
        return cls(
            ErrorKind.INVALID_STATE_TRANSITION,
            message,
            entity="Order",
            entity_id=str(order_id),
            details={"status": status},
        )

    @classmethod
    def invalid_callback(cls, reason: str) -> "OrderingError":
        return cls(
            ErrorKind.INVALID_CALLBACK,
            f"Invalid gateway callback: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def validation(cls, message: str, **details: Any) -> "OrderingError":
        return cls(ErrorKind.VALIDATION, message, details=details)

    @classmethod
    def constraint_violation(
        cls, constraint: str, message: str, entity: Optional[str] = None, entity_id: Any = None
    ) -> "OrderingError":
        return cls(
            ErrorKind.CONSTRAINT_VIOLATION,
            message,
            entity=entity,
            entity_id=str(entity_id) if entity_id is not None else None,
            constraint=constraint,
        )

    @classmethod
    def conflict(cls, order_id: Any, expected_version: int) -> "OrderingError":
        return cls(
            ErrorKind.CONFLICT,
            f"Order {order_id} was modified concurrently (expected version {expected_version})",
            entity="Order",
            entity_id=str(order_id),
            details={"expected_version": expected_version},
        )
