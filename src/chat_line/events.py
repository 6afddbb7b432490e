import logging
from typing import Any, Callable, Dict, Hashable, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventEmitter:
    """Synchronous publish/subscribe keyed by event kind.

    Handlers for one kind run in registration order. A handler raising an exception is logged
    and does not stop the remaining handlers of the same dispatch.
    """

    def __init__(self):
        self._handlers: Dict[Hashable, List[Handler]] = {}

    def on(self, event: Hashable, handler: Handler) -> "EventEmitter":
        self._handlers.setdefault(event, []).append(handler)
        return self

    def once(self, event: Hashable, handler: Handler) -> "EventEmitter":
        def wrapper(payload: Any) -> None:
            self.off(event, wrapper)
            handler(payload)

        wrapper.listener = handler
        return self.on(event, wrapper)

    def off(self, event: Hashable, handler: Handler) -> "EventEmitter":
        """Removes the most recent registration of handler (or of a `once` wrapping it)."""
        handlers = self._handlers.get(event)
        if not handlers:
            return self
        for i in range(len(handlers) - 1, -1, -1):
            registered = handlers[i]
            if registered == handler or getattr(registered, 'listener', None) == handler:
                del handlers[i]
                break
        if not handlers:
            del self._handlers[event]
        return self

    def listener_count(self, event: Hashable) -> int:
        return len(self._handlers.get(event, ()))

    def emit(self, event: Hashable, payload: Any = None) -> bool:
        """Invokes all handlers registered for event.

        Returns:
            True if at least one handler was registered, False otherwise.
        """
        handlers = self._handlers.get(event)
        if not handlers:
            logger.debug("No handlers for %s", event)
            return False
        # copy, handlers may (un)register during dispatch
        for handler in list(handlers):
            try:
                handler(payload)
            except Exception:
                logger.error("Handler %r for event %s failed", handler, event, exc_info=True)
        return True
