"""
Free-text place name to coordinates via Nominatim.
"""

import logging
from typing import Optional

import aiohttp

from travel_explorer.models import GeocodeResult
from travel_explorer.providers.utils import http_get_json

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


async def geocode_place(
    name: str,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 8.0,
) -> Optional[GeocodeResult]:
    """Resolve a free-text place name to its single best Nominatim match."""
    if not name or not name.strip():
        return None
    params = {"q": name.strip(), "format": "json", "limit": "1"}
    headers = {"Accept-Language": "en"}
    data, error = await http_get_json(NOMINATIM_URL, params=params, headers=headers, timeout=timeout, session=session)
    if error is not None or not isinstance(data, list) or not data:
        logger.debug("geocode %r failed: %s", name, error or "no match")
        return None
    first = data[0]
    try:
        return GeocodeResult(
            lat=float(first["lat"]),
            lon=float(first["lon"]),
            display_name=first.get("display_name") or name,
        )
    except (KeyError, TypeError, ValueError):
        logger.debug("geocode %r returned an unusable match: %r", name, first)
        return None
