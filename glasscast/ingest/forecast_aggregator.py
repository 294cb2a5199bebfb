"""Collapse 3-hour forecast samples into daily summaries."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from glasscast.ingest.icons import icon_for_condition
from glasscast.models.weather import DailySummary, ForecastSample

MAX_DAYS = 5


@dataclass
class _DayBucket:
    high: float
    low: float
    condition: str


def aggregate(
    samples: Iterable[ForecastSample],
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
    max_days: int = MAX_DAYS,
) -> list[DailySummary]:
    """Group samples by calendar day in ``tz`` and summarize each future day.

    ``tz`` of None means the local time zone. The current day and anything
    before it are skipped. A day's condition is the first sample seen for it.
    """
    if today is None:
        today = datetime.now(tz).date()

    days: dict[date, _DayBucket] = {}
    for sample in samples:
        day = datetime.fromtimestamp(sample.timestamp, tz).date()
        if day <= today:
            continue
        bucket = days.get(day)
        if bucket is None:
            days[day] = _DayBucket(
                high=sample.high, low=sample.low, condition=sample.condition
            )
        else:
            bucket.high = max(bucket.high, sample.high)
            bucket.low = min(bucket.low, sample.low)

    return [
        DailySummary(
            day=day.strftime("%a").upper(),
            date=day.isoformat(),
            high=days[day].high,
            low=days[day].low,
            condition=days[day].condition,
            icon=icon_for_condition(days[day].condition),
        )
        for day in sorted(days)[:max_days]
    ]
