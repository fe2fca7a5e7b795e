"""Entities of the order core domain."""

from .menu_offering import MenuOffering
from .order import Order
from .order_line import OrderLine

__all__ = ["MenuOffering", "Order", "OrderLine"]
