"""CQRS Queries for the order domain."""

from .get_account_orders import GetAccountOrdersQuery, GetAccountOrdersQueryHandler
from .get_order import GetOrderQuery, GetOrderQueryHandler

__all__ = [
    "GetAccountOrdersQuery",
    "GetAccountOrdersQueryHandler",
    "GetOrderQuery",
    "GetOrderQueryHandler",
]
