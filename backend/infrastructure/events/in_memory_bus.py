"""In-memory event bus implementation.

Single-process implementation of the IEventBus port. Handlers are kept
in a registry and awaited one after another, in subscription order.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Type, TypeVar

from domain.order.core.events.base import DomainEvent

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)

Handler = Callable[[Any], Awaitable[None]]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class InMemoryEventBus:
    """
    In-memory implementation of IEventBus port.

    Dispatch is by exact event type. A failing handler is logged and the
    remaining handlers still run; publishing never raises.

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(OrderDelivered, handler.handle)
        >>> await bus.publish_all(order.collect_events())
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}

    def subscribe(self, event_type: Type[TEvent], handler: Callable[[TEvent], Awaitable[None]]) -> None:
        """
        Subscribe a handler to an event type.

        The same handler subscribed twice is called twice.
        """
        self._handlers.setdefault(event_type, []).append(handler)

        logger.debug(
            "Handler subscribed",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )

    async def publish(self, event: TEvent) -> None:
        """Publish an event to every handler subscribed to its type."""
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for event", extra={"event_type": event_type.__name__})
            return

        logger.info(
            "Publishing event",
            extra={
                **event.log_fields(),
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "Event handler failed",
                    extra={
                        **event.log_fields(),
                        "handler": _handler_name(handler),
                        "error": str(e),
                    },
                    exc_info=True,
                )

    async def publish_all(self, events: Iterable[DomainEvent]) -> None:
        """Publish events in the order they were recorded."""
        for event in events:
            await self.publish(event)

    def unsubscribe(self, event_type: Type[TEvent], handler: Callable[[TEvent], Awaitable[None]]) -> bool:
        """
        Remove the first subscription of handler for event_type.

        Returns:
            True if handler was found and removed, False otherwise
        """
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return False

        handlers.remove(handler)
        logger.debug(
            "Handler unsubscribed",
            extra={"event_type": event_type.__name__, "handler": _handler_name(handler)},
        )
        return True

    def clear(self) -> None:
        """Remove all handlers (test utility)."""
        self._handlers.clear()
        logger.debug("All event handlers cleared")

    def get_handler_count(self, event_type: Type[TEvent]) -> int:
        return len(self._handlers.get(event_type, []))
