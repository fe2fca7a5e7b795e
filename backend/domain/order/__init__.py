"""Order domain - order lifecycle and inventory reservation.

Orders reserve stock on menu offerings when created, wait for payment
(cash on delivery or payment gateway) and either get confirmed and
scheduled for delivery or fail and give their stock back.
"""
