"""Synchronous publish/subscribe event bus.

Events are plain dataclasses deriving from ``Event``. Handlers subscribe to an
event class and are called in subscription order when an instance of that
class (or a subclass) is published.

Typical usage example:
    bus = EventBus()
    bus.subscribe(CommandFiredEvent, lambda event: print(event.command))
    bus.publish(CommandFiredEvent(command="brake_toggle"))
"""

import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from airctl.core.logging_system import get_logger

logger = get_logger(__name__)

EventHandler = Callable[[Any], None]


@dataclass
class Event:
    """Base class for all bus events.

    Attributes:
        timestamp: Monotonic time the event was created.
    """

    timestamp: float = field(default_factory=time.monotonic, kw_only=True)


class EventBus:
    """Dispatches events to handlers registered per event type."""

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[EventHandler]] = defaultdict(list)
        self._published_count = 0

    def subscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Register a handler for an event type.

        Args:
            event_type: Event class to listen for (subclasses included).
            handler: Callable receiving the event instance.
        """
        if handler in self._handlers[event_type]:
            return
        self._handlers[event_type].append(handler)
        logger.debug(
            "Subscribed %s to %s", getattr(handler, "__name__", "handler"), event_type.__name__
        )

    def unsubscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Remove a previously registered handler.

        Args:
            event_type: Event class the handler was registered for.
            handler: Handler to remove. Unknown handlers are ignored.
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(self, event: Event) -> None:
        """Deliver an event to every matching handler.

        A failing handler is logged and does not prevent delivery to the
        remaining handlers.

        Args:
            event: Event instance to publish.
        """
        self._published_count += 1
        for event_type, handlers in list(self._handlers.items()):
            if not isinstance(event, event_type):
                continue
            for handler in list(handlers):
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        "Event handler %s failed for %s: %s",
                        getattr(handler, "__name__", "handler"),
                        type(event).__name__,
                        e,
                    )

    @property
    def published_count(self) -> int:
        """Number of events published since creation."""
        return self._published_count

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
