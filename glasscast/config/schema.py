"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from glasscast.models.common import TemperatureUnit

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_GEO_URL = "https://api.openweathermap.org/geo/1.0"


class WeatherApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = OPENWEATHER_BASE_URL
    geo_url: str = OPENWEATHER_GEO_URL
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    cache_ttl_seconds: float = Field(default=300.0, gt=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=500, ge=0)
    geocode_limit: int = Field(default=5, ge=1, le=5)
    max_results: int = Field(default=3, ge=1, le=5)
    recent_limit: int = Field(default=10, ge=1)


class AuthConfig(BaseModel):
    model_config = {"extra": "forbid"}

    url: str = ""
    anon_key: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    startup_delay_ms: int = Field(default=300, ge=0)
    login_settle_ms: int = Field(default=300, ge=0)
    login_retry_ms: int = Field(default=500, ge=0)
    post_login_delay_ms: int = Field(default=100, ge=0)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_latitude: float = Field(default=51.5074, ge=-90.0, le=90.0)
    default_longitude: float = Field(default=-0.1278, ge=-180.0, le=180.0)
    default_city: str = "London"
    timeout_seconds: float = Field(default=2.0, ge=0.0)


class GlasscastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    weather: WeatherApiConfig = WeatherApiConfig()
    search: SearchConfig = SearchConfig()
    auth: AuthConfig = AuthConfig()
    location: LocationConfig = LocationConfig()
    units: TemperatureUnit = TemperatureUnit.CELSIUS
