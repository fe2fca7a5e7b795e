"""Delivery scheduling adapters."""

from infrastructure.delivery.in_memory_scheduler import DeliverySchedule, InMemoryDeliveryScheduler

__all__ = ["DeliverySchedule", "InMemoryDeliveryScheduler"]
