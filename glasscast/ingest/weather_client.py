"""OpenWeather REST client with a short-lived in-memory cache."""

import logging
import time
from collections.abc import Callable
from datetime import date, tzinfo
from typing import Any

import httpx
from pydantic import BaseModel, Field, TypeAdapter

from glasscast.config.schema import OPENWEATHER_BASE_URL, OPENWEATHER_GEO_URL
from glasscast.ingest.errors import (
    DecodingError,
    InvalidURLError,
    NetworkError,
    WeatherError,
    error_for_status,
)
from glasscast.ingest.forecast_aggregator import aggregate
from glasscast.ingest.icons import icon_for_condition
from glasscast.ingest.staleness import is_entry_stale
from glasscast.models.common import coordinate_key
from glasscast.models.weather import (
    CacheEntry,
    CurrentConditions,
    DailySummary,
    ForecastSample,
    GeocodingHit,
)

logger = logging.getLogger(__name__)

DEFAULT_CONDITION = "Clear"
DEFAULT_CACHE_TTL = 300.0
GEOCODE_LIMIT = 5


class _Main(BaseModel):
    temp: float
    temp_min: float
    temp_max: float


class _Condition(BaseModel):
    main: str
    description: str = ""


class _CurrentResponse(BaseModel):
    name: str
    main: _Main
    weather: list[_Condition] = []


class _ForecastItem(BaseModel):
    dt: int
    main: _Main
    weather: list[_Condition] = []


class _ForecastResponse(BaseModel):
    items: list[_ForecastItem] = Field(alias="list")


class _GeocodingResult(BaseModel):
    name: str
    lat: float
    lon: float
    country: str = ""
    state: str | None = None


_GEOCODING_ADAPTER = TypeAdapter(list[_GeocodingResult])


class WeatherClient:
    """Async client for the current, forecast and geocoding endpoints.

    Requests are always metric; display conversion happens downstream.
    Current-conditions lookups are memoized per coordinate pair for
    ``cache_ttl`` seconds of wall-clock time. Nothing evicts entries in the
    background: they are overwritten by a newer fetch or dropped by
    ``clear_cache``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_BASE_URL,
        geo_url: str = OPENWEATHER_GEO_URL,
        timeout: float = 30.0,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.geo_url = geo_url.rstrip("/")
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}

    async def fetch_current(self, lat: float, lon: float) -> CurrentConditions:
        key = coordinate_key(lat, lon)
        cached = self._cache.get(key)
        if cached is not None and not is_entry_stale(cached, self.cache_ttl, self._clock()):
            logger.debug("Cache hit for %s", key)
            return cached.payload

        resp = await self._get(
            f"{self.base_url}/weather",
            {"lat": lat, "lon": lon, "appid": self.api_key, "units": "metric"},
        )
        if resp.status_code != 200:
            logger.error("Current weather for %s returned %d", key, resp.status_code)
            raise error_for_status(resp.status_code)

        data = _decode(resp, _CurrentResponse.model_validate)
        condition = data.weather[0].main if data.weather else DEFAULT_CONDITION
        conditions = CurrentConditions(
            temperature=data.main.temp,
            high=data.main.temp_max,
            low=data.main.temp_min,
            condition=condition,
            icon=icon_for_condition(condition),
            location=data.name,
        )

        self._cache[key] = CacheEntry(key=key, payload=conditions, fetched_at=self._clock())
        logger.info("Fetched current weather for %s: %.1f°C %s", key, conditions.temperature, condition)
        return conditions

    async def fetch_forecast_samples(self, lat: float, lon: float) -> list[ForecastSample]:
        """Fetch the raw 5-day/3-hour sample list. Never cached."""
        resp = await self._get(
            f"{self.base_url}/forecast",
            {"lat": lat, "lon": lon, "appid": self.api_key, "units": "metric"},
        )
        if resp.status_code != 200:
            logger.error(
                "Forecast for %s returned %d", coordinate_key(lat, lon), resp.status_code
            )
            raise error_for_status(resp.status_code)

        data = _decode(resp, _ForecastResponse.model_validate)
        return [
            ForecastSample(
                timestamp=item.dt,
                high=item.main.temp_max,
                low=item.main.temp_min,
                condition=item.weather[0].main if item.weather else DEFAULT_CONDITION,
            )
            for item in data.items
        ]

    async def fetch_forecast(
        self,
        lat: float,
        lon: float,
        *,
        today: date | None = None,
        tz: tzinfo | None = None,
    ) -> list[DailySummary]:
        samples = await self.fetch_forecast_samples(lat, lon)
        return aggregate(samples, today=today, tz=tz)

    async def geocode(self, query: str, limit: int = GEOCODE_LIMIT) -> list[GeocodingHit]:
        """Resolve a free-text place name. A 404 means no results, not an error."""
        resp = await self._get(
            f"{self.geo_url}/direct",
            {"q": query, "limit": limit, "appid": self.api_key},
        )
        if resp.status_code == 404:
            return []
        if resp.status_code != 200:
            logger.error("Geocoding %r returned %d", query, resp.status_code)
            raise error_for_status(resp.status_code)

        results = _decode(resp, _GEOCODING_ADAPTER.validate_python)
        return [
            GeocodingHit(
                name=r.name,
                country=r.country,
                latitude=r.lat,
                longitude=r.lon,
                state=r.state,
            )
            for r in results
        ]

    async def reverse_geocode(self, lat: float, lon: float) -> str | None:
        """Best-effort place name for a coordinate; None on any failure."""
        try:
            resp = await self._get(
                f"{self.geo_url}/reverse",
                {"lat": lat, "lon": lon, "limit": 1, "appid": self.api_key},
            )
            if resp.status_code != 200:
                return None
            results = _decode(resp, _GEOCODING_ADAPTER.validate_python)
        except WeatherError as e:
            logger.warning("Reverse geocoding %s failed: %s", coordinate_key(lat, lon), e)
            return None
        return results[0].name if results else None

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.get(url, params=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            logger.error("Invalid request URL %s: %s", url, e)
            raise InvalidURLError(str(e)) from e
        except httpx.RequestError as e:
            logger.error("Request to %s failed: %s", url, e)
            raise NetworkError(f"Request failed: {e}") from e


def _decode(resp: httpx.Response, validate: Callable[[Any], Any]) -> Any:
    try:
        return validate(resp.json())
    except ValueError as e:
        logger.error("Failed to decode response from %s: %s", resp.request.url.path, e)
        raise DecodingError(f"Failed to decode response: {e}") from e
