"""Search-as-you-type over CitySearch, plus the recent-search list."""

import asyncio
import logging
import sqlite3

from glasscast.app.events import CitySelected, EventBus, LogoutCompleted
from glasscast.app.tasks import LatestTaskRunner
from glasscast.ingest.city_search import CitySearch
from glasscast.ingest.errors import WeatherError
from glasscast.models.weather import CityCandidate
from glasscast.storage import preferences_repo

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10


def add_recent(
    recent: list[CityCandidate], city: CityCandidate, limit: int = RECENT_LIMIT
) -> list[CityCandidate]:
    """Move ``city`` to the front, dropping any entry with the same id, capped at ``limit``."""
    updated = [city] + [c for c in recent if c.id != city.id]
    return updated[:limit]


class SearchController:
    """Debounced city search whose results only the latest query may set."""

    def __init__(
        self,
        search: CitySearch,
        conn: sqlite3.Connection,
        bus: EventBus,
        debounce: float = 0.5,
        recent_limit: int = RECENT_LIMIT,
    ):
        self.search = search
        self.conn = conn
        self.bus = bus
        self.debounce = debounce
        self.recent_limit = recent_limit

        self.query = ""
        self.results: list[CityCandidate] = []
        self.recent: list[CityCandidate] = []
        self.is_loading = False
        self.error_message: str | None = None
        self._runner = LatestTaskRunner("search")

        bus.subscribe(LogoutCompleted, self._on_logout)

    def update_query(self, query: str) -> asyncio.Task | None:
        """Schedule a search for ``query``, superseding any pending one.

        An empty query clears the results at once and schedules nothing.
        """
        self.query = query
        if not query.strip():
            self._runner.cancel()
            self.results = []
            self.is_loading = False
            self.error_message = None
            return None
        return self._runner.start(lambda generation: self._run(query, generation))

    async def search_now(self, query: str) -> list[CityCandidate]:
        """Schedule ``query`` and wait for it to settle."""
        task = self.update_query(query)
        if task is not None:
            await self._runner.wait(task)
        return self.results

    async def _run(self, query: str, generation: int) -> None:
        await asyncio.sleep(self.debounce)
        if not self._runner.is_current(generation):
            return

        self.is_loading = True
        self.error_message = None
        try:
            results = await self.search.search(query)
        except WeatherError as e:
            if self._runner.is_current(generation):
                self.error_message = e.user_message
                self.results = []
            return
        except Exception:
            logger.exception("City search for %r failed", query)
            if self._runner.is_current(generation):
                self.error_message = "Failed to search cities"
                self.results = []
            return
        finally:
            if self._runner.is_current(generation):
                self.is_loading = False

        if self._runner.is_current(generation):
            self.results = results

    async def select_city(self, city: CityCandidate) -> None:
        self.recent = add_recent(self.recent, city, self.recent_limit)
        preferences_repo.save_recent_searches(self.conn, self.recent)
        await self.bus.publish(CitySelected(city=city))

    def load_recent(self) -> list[CityCandidate]:
        self.recent = preferences_repo.load_recent_searches(self.conn)[: self.recent_limit]
        return self.recent

    def clear_recent(self) -> None:
        self.recent = []
        preferences_repo.clear_recent_searches(self.conn)

    def _on_logout(self, event: LogoutCompleted) -> None:
        self.recent = []
