"""
OpenWeatherMap access: the 5-day / 3-hour forecast (source of climate
samples) and current conditions.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp

from travel_explorer.models import CurrentWeather, ForecastSample
from travel_explorer.providers.utils import http_get_json

logger = logging.getLogger(__name__)

OWM_BASE = "https://api.openweathermap.org/data/2.5"


def _params(lat: float, lon: float, api_key: str) -> Dict[str, str]:
    return {"lat": str(lat), "lon": str(lon), "units": "metric", "appid": api_key}


def parse_forecast_samples(payload: Any) -> List[ForecastSample]:
    """Turn a forecast payload into samples, dropping incomplete entries."""
    if not isinstance(payload, dict):
        return []
    samples: List[ForecastSample] = []
    for item in payload.get("list") or []:
        try:
            main = item["main"]
            ts = datetime.fromtimestamp(int(item["dt"]), tz=timezone.utc)
            temp = float(main["temp"])
            humidity = float(main["humidity"])
        except (KeyError, TypeError, ValueError, OverflowError, OSError):
            continue
        rain = item.get("rain") or {}
        precipitation = None
        if isinstance(rain, dict):
            amount = rain.get("3h") or rain.get("1h")
            if amount is not None:
                try:
                    precipitation = float(amount)
                except (TypeError, ValueError):
                    precipitation = None
        samples.append(ForecastSample(
            timestamp=ts,
            temperature_c=temp,
            humidity_pct=humidity,
            precipitation_mm=precipitation,
        ))
    return samples


def parse_current(payload: Any) -> Optional[CurrentWeather]:
    if not isinstance(payload, dict):
        return None
    main = payload.get("main") or {}
    try:
        temp = float(main["temp"])
    except (KeyError, TypeError, ValueError):
        return None
    feels = main.get("feels_like")
    weather = payload.get("weather") or []
    condition = weather[0].get("main") if weather and isinstance(weather[0], dict) else None
    return CurrentWeather(
        temperature_c=temp,
        feels_like_c=float(feels) if isinstance(feels, (int, float)) else None,
        condition=condition,
    )


async def fetch_forecast_samples(
    lat: float,
    lon: float,
    api_key: Optional[str],
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
) -> Optional[List[ForecastSample]]:
    """Forecast samples, or None when the key is missing or the call fails."""
    if not api_key:
        logger.debug("OpenWeatherMap key missing; skipping forecast")
        return None
    data, error = await http_get_json(
        f"{OWM_BASE}/forecast", params=_params(lat, lon, api_key), timeout=timeout, session=session
    )
    if error is not None:
        return None
    return parse_forecast_samples(data)


async def fetch_current_weather(
    lat: float,
    lon: float,
    api_key: Optional[str],
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
) -> Optional[CurrentWeather]:
    if not api_key:
        return None
    data, error = await http_get_json(
        f"{OWM_BASE}/weather", params=_params(lat, lon, api_key), timeout=timeout, session=session
    )
    if error is not None:
        return None
    return parse_current(data)
