"""Common types and helpers shared across models."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class TemperatureUnit(StrEnum):
    CELSIUS = "metric"
    FAHRENHEIT = "imperial"

    @property
    def display_name(self) -> str:
        return "Celsius" if self is TemperatureUnit.CELSIUS else "Fahrenheit"

    @property
    def symbol(self) -> str:
        return "°C" if self is TemperatureUnit.CELSIUS else "°F"

    def convert(self, celsius: float) -> float:
        """Convert a metric reading into this unit."""
        if self is TemperatureUnit.CELSIUS:
            return celsius
        return celsius * 9 / 5 + 32


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def coordinate_key(latitude: float, longitude: float) -> str:
    """Fixed-precision key for a coordinate pair.

    Used both as the weather cache key and as the identity of a searched city,
    so repeated lookups of the same place collapse to one key.
    """
    # Adding 0.0 turns -0.0 into 0.0 so both sides of zero share a key.
    return f"{round(latitude, 4) + 0.0:.4f},{round(longitude, 4) + 0.0:.4f}"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
