"""Weather data models."""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class IconKey(StrEnum):
    CLEAR = "clear"
    CLOUDS = "clouds"
    RAIN = "rain"
    THUNDERSTORM = "thunderstorm"
    SNOW = "snow"
    FOG = "fog"
    DEFAULT = "default"


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    high: float
    low: float
    condition: str
    icon: IconKey
    location: str


@dataclass(frozen=True)
class ForecastSample:
    timestamp: int  # epoch seconds, start of the 3-hour slot
    high: float
    low: float
    condition: str


@dataclass(frozen=True)
class DailySummary:
    day: str  # "MON"
    date: str  # YYYY-MM-DD
    high: float
    low: float
    condition: str
    icon: IconKey


@dataclass(frozen=True)
class GeocodingHit:
    name: str
    country: str
    latitude: float
    longitude: float
    state: str | None = None


@dataclass(frozen=True)
class CityCandidate:
    id: str
    name: str
    country: str
    latitude: float
    longitude: float
    temperature: float
    condition: str

    @property
    def display_name(self) -> str:
        return f"{self.name}, {self.country}"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CityCandidate":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            country=str(data["country"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            temperature=float(data["temperature"]),
            condition=str(data["condition"]),
        )


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: CurrentConditions
    fetched_at: float  # epoch seconds
