"""
Monthly climate outlook derived from forecast samples.

This substitutes a few days of forecast for real climatology: a month's
figures only reflect the forecast window that happens to fall in it. Callers
must label the result as an approximation.
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from travel_explorer.models import ClimateMonth, ForecastSample, MonthRating
from travel_explorer.utils.single_flight import SingleFlight

logger = logging.getLogger(__name__)

GOOD_TEMP_RANGE_C = (15.0, 30.0)
GOOD_RAIN_LIMIT_MM = 100.0


def aggregate_monthly(samples: Iterable[ForecastSample]) -> List[ClimateMonth]:
    """Group samples by UTC calendar month (0 = January).

    Temperature and humidity are averaged; precipitation is summed, a missing
    amount counting as zero. Months without samples are left out entirely.
    """
    buckets: Dict[int, List[ForecastSample]] = defaultdict(list)
    for s in samples:
        buckets[s.timestamp.month - 1].append(s)

    months: List[ClimateMonth] = []
    for month in sorted(buckets):
        group = buckets[month]
        months.append(ClimateMonth(
            month=month,
            avg_temperature_c=sum(s.temperature_c for s in group) / len(group),
            avg_humidity_pct=sum(s.humidity_pct for s in group) / len(group),
            total_rain_mm=sum(s.precipitation_mm or 0.0 for s in group),
        ))
    return months


def classify_month(month: ClimateMonth) -> MonthRating:
    low, high = GOOD_TEMP_RANGE_C
    if low <= month.avg_temperature_c <= high and month.total_rain_mm < GOOD_RAIN_LIMIT_MM:
        return MonthRating.GOOD
    return MonthRating.BAD


def rate_months(months: Iterable[ClimateMonth]) -> Dict[int, MonthRating]:
    """Rating for all twelve months; months without data are UNKNOWN."""
    ratings = {m: MonthRating.UNKNOWN for m in range(12)}
    for month in months:
        ratings[month.month] = classify_month(month)
    return ratings


SampleFetcher = Callable[[float, float], Awaitable[Optional[List[ForecastSample]]]]


def climate_key(title: str, lat: float, lon: float) -> str:
    return f"{title}:{lat:.2f}:{lon:.2f}"


class ClimateCache:
    """Process-wide memo of monthly outlooks keyed by place and rounded coordinates.

    Only successful aggregations are stored; a failed forecast is retried on
    the next request.
    """

    def __init__(self, fetch_samples: SampleFetcher):
        self._fetch_samples = fetch_samples
        self._entries: Dict[str, List[ClimateMonth]] = {}
        self._flight: SingleFlight[str, Optional[List[ClimateMonth]]] = SingleFlight()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def get(self, title: str, lat: float, lon: float) -> Optional[List[ClimateMonth]]:
        key = climate_key(title, lat, lon)
        if key in self._entries:
            return self._entries[key]
        return await self._flight.do(key, lambda: self._load(key, lat, lon))

    async def _load(self, key: str, lat: float, lon: float) -> Optional[List[ClimateMonth]]:
        samples = await self._fetch_samples(lat, lon)
        if samples is None:
            return None
        months = aggregate_monthly(samples)
        self._entries[key] = months
        logger.debug("climate outlook %s covers months %s", key, [m.month for m in months])
        return months
