"""Output formatters for weather, search results and status."""

import json

from glasscast.models.common import TemperatureUnit
from glasscast.models.weather import CityCandidate, CurrentConditions, DailySummary


def _temp(celsius: float, unit: TemperatureUnit) -> str:
    return f"{round(unit.convert(celsius))}{unit.symbol}"


def format_weather_text(
    current: CurrentConditions,
    forecast: list[DailySummary],
    unit: TemperatureUnit = TemperatureUnit.CELSIUS,
) -> str:
    """Plain text block: current conditions then one line per forecast day."""
    lines = [
        f"=== {current.location} ===",
        f"{_temp(current.temperature, unit)} {current.condition} [{current.icon}]",
        f"H: {_temp(current.high, unit)}  L: {_temp(current.low, unit)}",
    ]
    if forecast:
        lines.append("")
        lines.append(f"{len(forecast)}-day forecast:")
        for day in forecast:
            lines.append(
                f"  {day.day}  {_temp(day.high, unit):>6} / {_temp(day.low, unit):<6} "
                f"{day.condition} [{day.icon}]"
            )
    return "\n".join(lines)


def format_weather_json(
    current: CurrentConditions,
    forecast: list[DailySummary],
    unit: TemperatureUnit = TemperatureUnit.CELSIUS,
) -> str:
    data = {
        "unit": unit.value,
        "current": {
            "location": current.location,
            "temperature": unit.convert(current.temperature),
            "high": unit.convert(current.high),
            "low": unit.convert(current.low),
            "condition": current.condition,
            "icon": current.icon.value,
        },
        "forecast": [
            {
                "day": d.day,
                "date": d.date,
                "high": unit.convert(d.high),
                "low": unit.convert(d.low),
                "condition": d.condition,
                "icon": d.icon.value,
            }
            for d in forecast
        ],
    }
    return json.dumps(data, indent=2)


def format_cities_text(
    cities: list[CityCandidate], unit: TemperatureUnit = TemperatureUnit.CELSIUS
) -> str:
    if not cities:
        return "No cities found"
    return "\n".join(
        f"{i}. {c.display_name}  {_temp(c.temperature, unit)} {c.condition}"
        for i, c in enumerate(cities, start=1)
    )


def format_cities_json(cities: list[CityCandidate]) -> str:
    return json.dumps([c.to_dict() for c in cities], indent=2)
