"""Device location with a one-shot fix and a timed fallback."""

import asyncio
import logging
from collections.abc import Callable

from glasscast.models.common import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = Coordinates(latitude=51.5074, longitude=-0.1278)
DEFAULT_TIMEOUT = 2.0


class LocationResolver:
    """Bridges a callback-style location source to an awaitable.

    The source reports through ``provide`` (or ``fail``). ``resolve`` waits
    for the first fix up to ``timeout`` seconds, then falls back to
    ``default``.
    """

    def __init__(
        self,
        default: Coordinates = DEFAULT_LOCATION,
        timeout: float = DEFAULT_TIMEOUT,
        request_location: Callable[[], None] | None = None,
    ):
        self.default = default
        self.timeout = timeout
        self.request_location = request_location
        self.last_known: Coordinates | None = None
        self.last_error: str | None = None
        self._pending: asyncio.Future[Coordinates] | None = None

    def provide(self, latitude: float, longitude: float) -> None:
        fix = Coordinates(latitude=latitude, longitude=longitude)
        self.last_known = fix
        if self._pending is not None and not self._pending.done():
            self._pending.set_result(fix)

    def fail(self, error: Exception) -> None:
        # The pending wait keeps running and falls back on timeout.
        logger.warning("Location source failed: %s", error)
        self.last_error = "Failed to get location. Using default location."

    async def resolve(self) -> tuple[Coordinates, bool]:
        """Return ``(coordinates, is_fallback)``."""
        if self.last_known is not None:
            return self.last_known, False

        if self._pending is None or self._pending.done():
            self._pending = asyncio.get_running_loop().create_future()
        pending = self._pending
        if self.request_location is not None:
            self.request_location()

        try:
            fix = await asyncio.wait_for(asyncio.shield(pending), self.timeout)
        except TimeoutError:
            logger.info(
                "No location fix within %.1fs, using default %s",
                self.timeout, self.default,
            )
            return self.default, True
        return fix, False
