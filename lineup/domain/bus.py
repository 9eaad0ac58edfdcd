"""In-process dispatch of schedule-change events to audit and other listeners."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)
Handler = Callable[[E], None]


class EventBus:
    """Routes each published event to the handlers registered for its exact type.

    Dispatch is synchronous and follows registration order. An exception
    raised by a handler reaches the publisher, so a failed audit write
    surfaces on the request that caused it.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[BaseModel], list[Handler]] = {}

    def subscribe(self, event_type: type[E], handler: Handler[E]) -> Callable[[], None]:
        """Register *handler* and return a callable that removes it again."""
        self._handlers.setdefault(event_type, []).append(handler)

        def unsubscribe() -> None:
            registered = self._handlers.get(event_type, [])
            if handler in registered:
                registered.remove(handler)

        return unsubscribe

    def publish(self, event: BaseModel) -> int:
        """Deliver *event* and return how many handlers received it."""
        # copy so a handler may unsubscribe itself mid-dispatch
        handlers = list(self._handlers.get(type(event), ()))
        logger.debug("dispatching %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)
        return len(handlers)
