"""Domain errors for the Order bounded context."""

from domain.order.core.exceptions.ordering_errors import ErrorKind, OrderingError

__all__ = [
    "ErrorKind",
    "OrderingError",
]
