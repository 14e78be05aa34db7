"""
Weather digest: current conditions plus daily temperature ranges.
"""

from collections import OrderedDict
from typing import Iterable, List, Optional

from travel_explorer.models import CurrentWeather, DailyRange, ForecastSample, WeatherDigest


def daily_ranges(samples: Iterable[ForecastSample], days: int = 5) -> List[DailyRange]:
    """Min/max temperature per UTC calendar day, in first-seen order."""
    by_day: "OrderedDict" = OrderedDict()
    for s in samples:
        by_day.setdefault(s.timestamp.date(), []).append(s.temperature_c)
    out = []
    for day, temps in list(by_day.items())[:days]:
        out.append(DailyRange(day=day, min_c=min(temps), max_c=max(temps)))
    return out


def build_digest(
    current: Optional[CurrentWeather],
    samples: Optional[List[ForecastSample]],
) -> Optional[WeatherDigest]:
    if current is None and samples is None:
        return None
    return WeatherDigest(current=current, days=daily_ranges(samples or []))
