"""City search: geocode a query, then attach live conditions to the top hits."""

import logging

from glasscast.ingest.errors import WeatherError
from glasscast.ingest.weather_client import GEOCODE_LIMIT, WeatherClient
from glasscast.models.common import coordinate_key
from glasscast.models.weather import CityCandidate

logger = logging.getLogger(__name__)

MAX_RESULTS = 3


class CitySearch:
    def __init__(
        self,
        client: WeatherClient,
        max_results: int = MAX_RESULTS,
        geocode_limit: int = GEOCODE_LIMIT,
    ):
        self.client = client
        self.max_results = max_results
        self.geocode_limit = geocode_limit

    async def search(self, query: str) -> list[CityCandidate]:
        """Return up to ``max_results`` enriched candidates in provider order.

        A hit whose weather lookup fails is skipped; errors from the geocoding
        call itself propagate.
        """
        if not query.strip():
            return []

        hits = await self.client.geocode(query, limit=self.geocode_limit)
        results: list[CityCandidate] = []
        for hit in hits[: self.max_results]:
            try:
                weather = await self.client.fetch_current(hit.latitude, hit.longitude)
            except WeatherError as e:
                logger.warning(
                    "Skipping %s, %s: weather lookup failed: %s", hit.name, hit.country, e
                )
                continue
            results.append(
                CityCandidate(
                    id=coordinate_key(hit.latitude, hit.longitude),
                    name=hit.name,
                    country=hit.country,
                    latitude=hit.latitude,
                    longitude=hit.longitude,
                    temperature=weather.temperature,
                    condition=weather.condition,
                )
            )

        logger.info("Search %r: %d hits, %d enriched", query, len(hits), len(results))
        return results
