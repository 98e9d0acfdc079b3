"""
Signal Bus - in-process publish/subscribe between engine components.

The hotness tracker announces that territory triggers changed; the
decision featuring service listens and re-scans decisions. Handlers run
sequentially in subscription order and may be sync or async.

Usage:
    bus = SignalBus()
    bus.subscribe(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE, handler)
    await bus.emit(InternalEvent.TERRITORY_FEATURED_DECISIONS_TRIGGER_UPDATE)
"""
import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union

from loguru import logger

from constants import InternalEvent


Handler = Callable[..., Union[None, Awaitable[None]]]


class SignalBus:
    """Named-signal dispatcher."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    @staticmethod
    def _key(name: Union[InternalEvent, str]) -> str:
        return name.value if isinstance(name, InternalEvent) else str(name)

    def subscribe(self, name: Union[InternalEvent, str], handler: Handler) -> None:
        """Register handler for a signal name."""
        self._handlers[self._key(name)].append(handler)
        logger.debug(f"Subscribed {getattr(handler, '__qualname__', handler)} to {self._key(name)}")

    def unsubscribe(self, name: Union[InternalEvent, str], handler: Handler) -> bool:
        """Remove handler. Returns False if it was not registered."""
        handlers = self._handlers.get(self._key(name), [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def handlers(self, name: Union[InternalEvent, str]) -> List[Handler]:
        return list(self._handlers.get(self._key(name), []))

    async def emit(self, name: Union[InternalEvent, str], **payload: Any) -> int:
        """
        Emit a signal to every subscribed handler.

        A failing handler is logged and skipped; the emitter never sees
        its exception.

        Returns:
            Number of handlers that completed successfully
        """
        key = self._key(name)
        handlers = self.handlers(key)
        logger.debug(f"Emitting {key} to {len(handlers)} handler(s)")

        delivered = 0
        for handler in handlers:
            try:
                result = handler(**payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.exception(f"Handler {getattr(handler, '__qualname__', handler)} failed on {key}: {e}")

        return delivered


# Process-wide bus used by the scheduler
signal_bus = SignalBus()


__all__ = ["SignalBus", "signal_bus", "Handler"]
