"""Map provider condition text onto a fixed set of icon categories."""

from glasscast.models.weather import IconKey

# Checked in order; first match wins.
ICON_TABLE: tuple[tuple[tuple[str, ...], IconKey], ...] = (
    (("clear",), IconKey.CLEAR),
    (("cloud",), IconKey.CLOUDS),
    (("rain", "drizzle"), IconKey.RAIN),
    (("thunderstorm",), IconKey.THUNDERSTORM),
    (("snow",), IconKey.SNOW),
    (("mist", "fog", "haze"), IconKey.FOG),
)


def icon_for_condition(condition: str) -> IconKey:
    text = condition.lower()
    for needles, icon in ICON_TABLE:
        if any(n in text for n in needles):
            return icon
    return IconKey.DEFAULT
