"""Current conditions and forecast for the selected place."""

import asyncio
import dataclasses
import logging

from glasscast.app.events import CitySelected, EventBus, TemperatureUnitChanged
from glasscast.app.location import LocationResolver
from glasscast.app.tasks import LatestTaskRunner
from glasscast.ingest.errors import WeatherError
from glasscast.ingest.weather_client import WeatherClient
from glasscast.models.common import Coordinates, TemperatureUnit
from glasscast.models.weather import CityCandidate, CurrentConditions, DailySummary

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Failed to fetch weather data. Please try again."


class WeatherController:
    """Each fetch supersedes the previous one; a stale fetch never writes state."""

    def __init__(
        self,
        client: WeatherClient,
        locator: LocationResolver,
        bus: EventBus,
        units: TemperatureUnit = TemperatureUnit.CELSIUS,
        default_city: str = "London",
    ):
        self.client = client
        self.locator = locator
        self.units = units
        self.default_city = default_city

        self.current: CurrentConditions | None = None
        self.forecast: list[DailySummary] = []
        self.is_loading = False
        self.error_message: str | None = None
        self.place: tuple[Coordinates, str] | None = None
        self._runner = LatestTaskRunner("weather")

        bus.subscribe(CitySelected, self._on_city_selected)
        bus.subscribe(TemperatureUnitChanged, self._on_unit_changed)

    async def fetch_weather(self) -> None:
        """Fetch for the device location, falling back to the default place."""
        await self._start(self._from_device)

    async def fetch_for_city(self, city: CityCandidate) -> None:
        await self.fetch_for_location(city.latitude, city.longitude, city.name)

    async def fetch_for_location(self, lat: float, lon: float, label: str) -> None:
        async def job(generation: int) -> None:
            await self._load(Coordinates(lat, lon), label, generation)

        await self._start(job)

    async def refresh(self) -> None:
        """Re-fetch the last place shown, or the device location if none."""
        if self.place is None:
            await self.fetch_weather()
            return
        coords, label = self.place
        await self.fetch_for_location(coords.latitude, coords.longitude, label)

    def display_temperature(self, celsius: float) -> float:
        return self.units.convert(celsius)

    async def _start(self, job) -> None:
        async def wrapped(generation: int) -> None:
            self.error_message = None
            self.is_loading = True
            try:
                await job(generation)
            finally:
                if self._runner.is_current(generation):
                    self.is_loading = False

        task = self._runner.start(wrapped)
        await self._runner.wait(task)

    async def _from_device(self, generation: int) -> None:
        coords, is_fallback = await self.locator.resolve()
        if not self._runner.is_current(generation):
            return
        label = None if is_fallback else await self.client.reverse_geocode(
            coords.latitude, coords.longitude
        )
        await self._load(coords, label or self.default_city, generation)

    async def _load(self, coords: Coordinates, label: str, generation: int) -> None:
        # A failure in either fetch cancels the other.
        try:
            async with asyncio.TaskGroup() as tg:
                current_task = tg.create_task(
                    self.client.fetch_current(coords.latitude, coords.longitude)
                )
                forecast_task = tg.create_task(
                    self.client.fetch_forecast(coords.latitude, coords.longitude)
                )
        except ExceptionGroup as eg:
            error = eg.exceptions[0]
            if isinstance(error, WeatherError):
                logger.warning("Weather fetch for %s failed: %s", label, error)
                self._fail(error.user_message, generation)
            else:
                logger.error(
                    "Unexpected error fetching weather for %s", label, exc_info=error
                )
                self._fail(GENERIC_ERROR, generation)
            return
        current, forecast = current_task.result(), forecast_task.result()

        if not self._runner.is_current(generation):
            return
        self.current = dataclasses.replace(current, location=label)
        self.forecast = forecast
        self.place = (coords, label)
        self.error_message = None

    def _fail(self, message: str, generation: int) -> None:
        if not self._runner.is_current(generation):
            return
        self.error_message = message
        self.current = None
        self.forecast = []

    async def _on_city_selected(self, event: CitySelected) -> None:
        await self.fetch_for_city(event.city)

    async def _on_unit_changed(self, event: TemperatureUnitChanged) -> None:
        self.units = event.unit
        await self.refresh()
