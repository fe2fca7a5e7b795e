"""Composition root of the ordering service.

Wires ports to adapters from the environment and exposes ready-to-use
command and query handlers.

Usage:
    container = build_container()
    order = await container.create_order.handle(CreateOrderCommand(...))
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from application.order.commands import (
    CompleteDeliveryCommandHandler,
    ConfirmCashPaymentCommandHandler,
    CreateOrderCommandHandler,
    ProcessGatewayCallbackCommandHandler,
    ProcessPaymentCommandHandler,
)
from application.order.compensation import ReservationCompensator
from application.order.event_handlers import OrderDeliveredHandler, PaymentOutcomeHandler
from application.order.locks import OrderLockRegistry
from application.order.orchestrators import DeliveryDefaults, PaymentCoordinator
from application.order.queries import GetAccountOrdersQueryHandler, GetOrderQueryHandler
from domain.order.core.events import OrderConfirmed, OrderDelivered, OrderPaymentFailed
from domain.order.core.ports import (
    IAccountStore,
    IDeliveryScheduler,
    IGatewayClient,
    IOfferingStore,
    IOrderRepository,
)
from domain.order.inventory.ledger import InventoryLedger
from infrastructure.cache.in_memory_idempotency_cache import InMemoryIdempotencyCache
from infrastructure.config import GatewaySettings, OrderingSettings
from infrastructure.delivery.in_memory_scheduler import InMemoryDeliveryScheduler
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.log_config import configure_logging
from infrastructure.payment.vnpay_client import VnpayGatewayClient
from infrastructure.persistence.factory import (
    get_account_store,
    get_offering_store,
    get_order_repository,
)

logger = logging.getLogger(__name__)


@dataclass
class OrderingContainer:
    """Wired handlers plus the adapters behind them (for tests and scripts)."""

    offering_store: IOfferingStore
    order_repository: IOrderRepository
    account_store: IAccountStore
    scheduler: IDeliveryScheduler
    gateway: IGatewayClient
    event_bus: InMemoryEventBus
    ledger: InventoryLedger
    coordinator: PaymentCoordinator

    create_order: CreateOrderCommandHandler
    process_payment: ProcessPaymentCommandHandler
    confirm_cash_payment: ConfirmCashPaymentCommandHandler
    process_gateway_callback: ProcessGatewayCallbackCommandHandler
    complete_delivery: CompleteDeliveryCommandHandler
    get_order: GetOrderQueryHandler
    get_account_orders: GetAccountOrdersQueryHandler


def build_container(
    settings: Optional[OrderingSettings] = None,
    gateway_settings: Optional[GatewaySettings] = None,
    offering_store: Optional[IOfferingStore] = None,
    order_repository: Optional[IOrderRepository] = None,
    account_store: Optional[IAccountStore] = None,
    scheduler: Optional[IDeliveryScheduler] = None,
    gateway: Optional[IGatewayClient] = None,
) -> OrderingContainer:
    """
    Build the ordering service.

    Every adapter can be injected; missing ones come from the persistence
    factory (REPOSITORY_BACKEND) or their in-memory implementation.
    """
    settings = settings or OrderingSettings.from_env()

    offering_store = offering_store or get_offering_store()
    order_repository = order_repository or get_order_repository()
    account_store = account_store or get_account_store()
    scheduler = scheduler or InMemoryDeliveryScheduler()
    gateway = gateway or VnpayGatewayClient(gateway_settings or GatewaySettings.from_env())

    event_bus = InMemoryEventBus()
    locks = OrderLockRegistry()
    ledger = InventoryLedger(offering_store)
    compensator = ReservationCompensator(
        ledger,
        max_attempts=settings.rollback_max_attempts,
        backoff_s=settings.rollback_backoff_s,
    )
    coordinator = PaymentCoordinator(
        repository=order_repository,
        compensator=compensator,
        scheduler=scheduler,
        gateway=gateway,
        idempotency_cache=InMemoryIdempotencyCache(default_ttl_seconds=settings.gateway_callback_ttl_s),
        locks=locks,
        delivery_defaults=DeliveryDefaults(
            lead_time=timedelta(hours=settings.delivery_lead_time_hours),
            address=settings.default_delivery_address,
            contact=settings.default_driver_contact,
        ),
        callback_ttl_seconds=settings.gateway_callback_ttl_s,
    )

    outcomes = PaymentOutcomeHandler()
    event_bus.subscribe(OrderConfirmed, outcomes.on_confirmed)
    event_bus.subscribe(OrderPaymentFailed, outcomes.on_payment_failed)
    event_bus.subscribe(OrderDelivered, OrderDeliveredHandler(scheduler).handle)

    logger.info(
        "Ordering container built",
        extra={
            "offering_store": type(offering_store).__name__,
            "order_repository": type(order_repository).__name__,
        },
    )

    return OrderingContainer(
        offering_store=offering_store,
        order_repository=order_repository,
        account_store=account_store,
        scheduler=scheduler,
        gateway=gateway,
        event_bus=event_bus,
        ledger=ledger,
        coordinator=coordinator,
        create_order=CreateOrderCommandHandler(
            order_repository, account_store, ledger, compensator, event_bus
        ),
        process_payment=ProcessPaymentCommandHandler(order_repository, gateway, event_bus, locks),
        confirm_cash_payment=ConfirmCashPaymentCommandHandler(coordinator, event_bus),
        process_gateway_callback=ProcessGatewayCallbackCommandHandler(coordinator, event_bus),
        complete_delivery=CompleteDeliveryCommandHandler(order_repository, event_bus, locks),
        get_order=GetOrderQueryHandler(order_repository),
        get_account_orders=GetAccountOrdersQueryHandler(order_repository),
    )


def bootstrap(env_file: Optional[Path] = None) -> OrderingContainer:
    """Load .env, configure logging and build the container."""
    env_path = env_file or Path(__file__).parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    configure_logging()
    return build_container()
