"""Tests for the OpenWeather client with mocked httpx."""

from datetime import UTC, date

import httpx
import pytest
import respx

from glasscast.ingest.errors import (
    DecodingError,
    InvalidAPIKeyError,
    InvalidURLError,
    LocationNotFoundError,
    NetworkError,
    RateLimitExceededError,
    ServerError,
)
from glasscast.ingest.weather_client import WeatherClient
from glasscast.models.weather import IconKey

BASE = "https://owm.test/data/2.5"
GEO = "https://owm.test/geo/1.0"
LAT, LON = 51.5074, -0.1278


class FakeClock:
    def __init__(self, now: float = 1_770_724_800.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(clock: FakeClock) -> WeatherClient:
    return WeatherClient(api_key="test-key", base_url=BASE, geo_url=GEO, clock=clock)


class TestFetchCurrent:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, client: WeatherClient, current_london: dict):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        result = await client.fetch_current(LAT, LON)
        assert result.temperature == 11.2
        assert result.high == 12.6
        assert result.low == 9.8
        assert result.condition == "Clouds"
        assert result.icon == IconKey.CLOUDS
        assert result.location == "London"

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_params(self, client: WeatherClient, current_london: dict):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        await client.fetch_current(LAT, LON)
        params = route.calls[0].request.url.params
        assert params["units"] == "metric"
        assert params["appid"] == "test-key"
        assert float(params["lat"]) == LAT
        assert float(params["lon"]) == LON

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_weather_array_defaults_to_clear(
        self, client: WeatherClient, current_london: dict
    ):
        current_london["weather"] = []
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        result = await client.fetch_current(LAT, LON)
        assert result.condition == "Clear"
        assert result.icon == IconKey.CLEAR

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error",
        [
            (401, InvalidAPIKeyError),
            (404, LocationNotFoundError),
            (429, RateLimitExceededError),
            (500, ServerError),
            (503, ServerError),
            (302, ServerError),
        ],
    )
    @respx.mock
    async def test_status_mapping(self, client: WeatherClient, status: int, error: type):
        respx.get(f"{BASE}/weather").mock(return_value=httpx.Response(status))

        with pytest.raises(error) as exc_info:
            await client.fetch_current(LAT, LON)
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body(self, client: WeatherClient):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )

        with pytest.raises(DecodingError):
            await client.fetch_current(LAT, LON)

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_fields(self, client: WeatherClient):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json={"name": "London", "main": {"temp": 3}})
        )

        with pytest.raises(DecodingError):
            await client.fetch_current(LAT, LON)

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, client: WeatherClient):
        respx.get(f"{BASE}/weather").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(NetworkError):
            await client.fetch_current(LAT, LON)

    @pytest.mark.asyncio
    async def test_unsupported_scheme_is_invalid_url(self):
        client = WeatherClient(api_key="k", base_url="ftp://owm.test/data/2.5")

        with pytest.raises(InvalidURLError):
            await client.fetch_current(LAT, LON)

    def test_error_user_messages(self):
        assert InvalidAPIKeyError().user_message == "API key is invalid. Please check configuration."
        assert str(RateLimitExceededError()) == "Too many requests. Please try again later."


class TestCurrentCache:
    @pytest.mark.asyncio
    @respx.mock
    async def test_hit_within_ttl(
        self, client: WeatherClient, clock: FakeClock, current_london: dict
    ):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        first = await client.fetch_current(LAT, LON)
        clock.now += 299.9
        second = await client.fetch_current(LAT, LON)

        assert second is first
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_refetch_at_ttl_overwrites(
        self, client: WeatherClient, clock: FakeClock, current_london: dict
    ):
        warmer = dict(current_london, main=dict(current_london["main"], temp=14.0))
        route = respx.get(f"{BASE}/weather").mock(
            side_effect=[
                httpx.Response(200, json=current_london),
                httpx.Response(200, json=warmer),
            ]
        )

        await client.fetch_current(LAT, LON)
        clock.now += 300
        refreshed = await client.fetch_current(LAT, LON)
        again = await client.fetch_current(LAT, LON)

        assert route.call_count == 2
        assert refreshed.temperature == 14.0
        assert again is refreshed

    @pytest.mark.asyncio
    @respx.mock
    async def test_keyed_by_coordinates(self, client: WeatherClient, current_london: dict):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        await client.fetch_current(LAT, LON)
        await client.fetch_current(48.8566, 2.3522)
        # Differences beyond the key precision collapse to one entry.
        await client.fetch_current(LAT + 0.00001, LON)

        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_errors_not_cached(self, client: WeatherClient, current_london: dict):
        route = respx.get(f"{BASE}/weather").mock(
            side_effect=[
                httpx.Response(500),
                httpx.Response(200, json=current_london),
            ]
        )

        with pytest.raises(ServerError):
            await client.fetch_current(LAT, LON)
        result = await client.fetch_current(LAT, LON)

        assert result.location == "London"
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_clear_cache(self, client: WeatherClient, current_london: dict):
        route = respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(200, json=current_london)
        )

        await client.fetch_current(LAT, LON)
        client.clear_cache()
        await client.fetch_current(LAT, LON)

        assert route.call_count == 2


class TestForecast:
    @pytest.mark.asyncio
    @respx.mock
    async def test_samples(self, client: WeatherClient, forecast_london: dict):
        route = respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_london)
        )

        samples = await client.fetch_forecast_samples(LAT, LON)
        assert len(samples) == 14
        assert samples[2].timestamp == 1770811200
        assert samples[2].high == 8.0
        assert samples[2].low == 3.0
        assert samples[2].condition == "Rain"
        assert route.calls[0].request.url.params["units"] == "metric"

    @pytest.mark.asyncio
    @respx.mock
    async def test_daily_summaries(self, client: WeatherClient, forecast_london: dict):
        respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_london)
        )

        days = await client.fetch_forecast(LAT, LON, today=date(2026, 2, 10), tz=UTC)
        assert [d.day for d in days] == ["WED", "THU", "FRI", "SAT", "SUN"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_cached(self, client: WeatherClient, forecast_london: dict):
        route = respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json=forecast_london)
        )

        await client.fetch_forecast_samples(LAT, LON)
        await client.fetch_forecast_samples(LAT, LON)
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_mapping(self, client: WeatherClient):
        respx.get(f"{BASE}/forecast").mock(return_value=httpx.Response(401))

        with pytest.raises(InvalidAPIKeyError):
            await client.fetch_forecast_samples(LAT, LON)

    @pytest.mark.asyncio
    @respx.mock
    async def test_missing_list(self, client: WeatherClient):
        respx.get(f"{BASE}/forecast").mock(
            return_value=httpx.Response(200, json={"cod": "200"})
        )

        with pytest.raises(DecodingError):
            await client.fetch_forecast_samples(LAT, LON)


class TestGeocode:
    @pytest.mark.asyncio
    @respx.mock
    async def test_hits(self, client: WeatherClient, geocode_springfield: list[dict]):
        route = respx.get(f"{GEO}/direct").mock(
            return_value=httpx.Response(200, json=geocode_springfield)
        )

        hits = await client.geocode("Springfield")
        assert len(hits) == 5
        assert hits[0].name == "Springfield"
        assert hits[0].state == "Illinois"
        assert hits[0].latitude == 39.799
        params = route.calls[0].request.url.params
        assert params["limit"] == "5"
        assert params["appid"] == "test-key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_query_is_encoded(self, client: WeatherClient):
        route = respx.get(f"{GEO}/direct").mock(return_value=httpx.Response(200, json=[]))

        await client.geocode("São Paulo, BR")
        request = route.calls[0].request
        assert request.url.params["q"] == "São Paulo, BR"
        assert b" " not in request.url.raw_path

    @pytest.mark.asyncio
    @respx.mock
    async def test_404_is_no_results(self, client: WeatherClient):
        respx.get(f"{GEO}/direct").mock(return_value=httpx.Response(404))

        assert await client.geocode("Atlantis") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error",
        [(401, InvalidAPIKeyError), (429, RateLimitExceededError), (500, ServerError)],
    )
    @respx.mock
    async def test_errors(self, client: WeatherClient, status: int, error: type):
        respx.get(f"{GEO}/direct").mock(return_value=httpx.Response(status))

        with pytest.raises(error):
            await client.geocode("Springfield")


class TestReverseGeocode:
    @pytest.mark.asyncio
    @respx.mock
    async def test_name(self, client: WeatherClient):
        respx.get(f"{GEO}/reverse").mock(
            return_value=httpx.Response(
                200, json=[{"name": "Westminster", "lat": LAT, "lon": LON, "country": "GB"}]
            )
        )

        assert await client.reverse_geocode(LAT, LON) == "Westminster"

    @pytest.mark.asyncio
    @respx.mock
    async def test_failures_return_none(self, client: WeatherClient):
        respx.get(f"{GEO}/reverse").mock(
            side_effect=[
                httpx.Response(500),
                httpx.Response(200, json=[]),
                httpx.ConnectError("down"),
            ]
        )

        assert await client.reverse_geocode(LAT, LON) is None
        assert await client.reverse_geocode(LAT, LON) is None
        assert await client.reverse_geocode(LAT, LON) is None
