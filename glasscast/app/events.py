"""Typed in-process event bus connecting the controllers."""

import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from glasscast.models.common import TemperatureUnit
from glasscast.models.weather import CityCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginCompleted:
    pass


@dataclass(frozen=True)
class LogoutCompleted:
    pass


@dataclass(frozen=True)
class CitySelected:
    city: CityCandidate


@dataclass(frozen=True)
class TemperatureUnitChanged:
    unit: TemperatureUnit


Handler = Callable[[Any], Awaitable[None] | None]


class EventBus:
    """Dispatches events to the handlers subscribed to their exact type."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> Callable[[], None]:
        """Register ``handler`` and return a callable that removes it."""
        self._handlers[event_type].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    async def publish(self, event: object) -> None:
        """Run handlers in subscription order; one failing does not stop the rest."""
        handlers = list(self._handlers.get(type(event), ()))
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Handler %r failed for %s", handler, type(event).__name__)
