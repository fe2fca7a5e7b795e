"""Domain layer of the meal-prep ordering service.

Business rules for menu offerings, stock reservation, orders and their
payment lifecycle, decoupled from persistence and the payment gateway.
"""
