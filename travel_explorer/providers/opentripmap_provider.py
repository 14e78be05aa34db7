"""
Nearby attractions via OpenTripMap.

Three candidate queries are tried in order (narrow filtered radius, broad
radius, bounding box) through the tiered resolver. Responses come in two
layouts, a flat list of point-tagged items or a GeoJSON-like feature
collection; both are normalized into `Place` records.
"""

import logging
from typing import List, Dict, Any, Optional
from urllib.parse import quote

import aiohttp

from travel_explorer.models import GeoPoint, Place, PlaceDetail, PlaceShape
from travel_explorer.providers.tiered import CandidateQuery, resolve_tiered
from travel_explorer.providers.utils import clamp, http_get_json

logger = logging.getLogger(__name__)

BASE = "https://api.opentripmap.com/0.1/en/places"
RADIUS_URL = f"{BASE}/radius"
BBOX_URL = f"{BASE}/bbox"

SIGHTSEEING_KINDS = "interesting_places,sights,architecture,historic"
MIN_RATE = 2
RESULT_LIMIT = 30


def _radius_params(api_key: str, lat: float, lon: float, radius: float, kinds: str = "") -> Dict[str, Any]:
    params = {
        "apikey": api_key,
        "radius": str(int(radius)),
        "lon": str(lon),
        "lat": str(lat),
    }
    if kinds:
        params["kinds"] = kinds
    params["rate"] = str(MIN_RATE)
    params["format"] = "json"
    params["limit"] = str(RESULT_LIMIT)
    return params


def bbox_half_span(radius: float) -> float:
    """Convert a radius in meters to a bounding-box half-span in degrees."""
    return clamp(radius / 120000.0, 0.01, 0.08)


def build_place_candidates(lat: float, lon: float, radius: float, api_key: str) -> List[CandidateQuery]:
    """Ordered OpenTripMap queries, most specific first."""
    deg = bbox_half_span(radius)
    bbox_params = {
        "apikey": api_key,
        "lon_min": str(lon - deg),
        "lon_max": str(lon + deg),
        "lat_min": str(lat - deg),
        "lat_max": str(lat + deg),
        "rate": str(MIN_RATE),
        "format": "json",
        "limit": str(RESULT_LIMIT),
    }
    return [
        CandidateQuery(
            label="radius-sights",
            url=RADIUS_URL,
            params=_radius_params(api_key, lat, lon, clamp(radius, 500, 3000), SIGHTSEEING_KINDS),
            normalize=normalize_places,
        ),
        CandidateQuery(
            label="radius-any",
            url=RADIUS_URL,
            params=_radius_params(api_key, lat, lon, clamp(radius, 1000, 5000)),
            normalize=normalize_places,
        ),
        CandidateQuery(
            label="bbox-any",
            url=BBOX_URL,
            params=bbox_params,
            normalize=normalize_places,
        ),
    ]


def classify_raw_place(item: Any) -> Optional[PlaceShape]:
    """Single discriminant check deciding which layout a raw item uses."""
    if not isinstance(item, dict):
        return None
    if isinstance(item.get("point"), dict):
        return PlaceShape.POINT
    geometry = item.get("geometry")
    if isinstance(geometry, dict) and isinstance(geometry.get("coordinates"), (list, tuple)):
        return PlaceShape.GEOMETRY
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_name(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _point_place(item: Dict[str, Any]) -> Optional[Place]:
    point = item["point"]
    lat, lon = _as_float(point.get("lat")), _as_float(point.get("lon"))
    name = _as_name(item.get("name"))
    if not name or lat is None or lon is None:
        return None
    return Place(
        name=name,
        point=GeoPoint(lat, lon),
        external_id=item.get("xid") or None,
        distance_m=_as_float(item.get("dist")),
        kinds=item.get("kinds") or None,
    )


def _geometry_place(item: Dict[str, Any]) -> Optional[Place]:
    coords = item["geometry"]["coordinates"]
    if len(coords) < 2:
        return None
    lon, lat = _as_float(coords[0]), _as_float(coords[1])
    props = item.get("properties")
    if not isinstance(props, dict):
        props = {}
    name = _as_name(props.get("name"))
    if not name or lat is None or lon is None:
        return None
    return Place(
        name=name,
        point=GeoPoint(lat, lon),
        external_id=props.get("xid") or None,
        distance_m=_as_float(props.get("dist")),
        kinds=props.get("kinds") or None,
    )


_BUILDERS = {
    PlaceShape.POINT: _point_place,
    PlaceShape.GEOMETRY: _geometry_place,
}


def normalize_places(payload: Any) -> List[Place]:
    """Normalize either response layout into places sorted by distance.

    Unrecognised or incomplete items are dropped one by one. Items without a
    distance sort as distance 0.
    """
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = payload.get("features") or []
    else:
        items = []

    out: List[Place] = []
    for item in items:
        shape = classify_raw_place(item)
        if shape is None:
            continue
        place = _BUILDERS[shape](item)
        if place is not None:
            out.append(place)
    out.sort(key=lambda p: p.distance_m or 0)
    return out


async def discover_places(
    lat: float,
    lon: float,
    radius: float,
    api_key: Optional[str],
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
) -> List[Place]:
    """Attractions around a point; [] when no key or every candidate is empty."""
    if not api_key:
        logger.debug("OpenTripMap key missing; skipping attraction lookup")
        return []
    candidates = build_place_candidates(lat, lon, radius, api_key)
    return await resolve_tiered(candidates, session=session, timeout=timeout)


def parse_place_detail(xid: str, data: Dict[str, Any]) -> PlaceDetail:
    preview = (data.get("preview") or {}).get("source") or None
    description = (
        (data.get("wikipedia_extracts") or {}).get("text")
        or (data.get("info") or {}).get("descr")
        or (data.get("address") or {}).get("city")
        or None
    )
    return PlaceDetail(external_id=xid, preview_image=preview, description=description)


async def fetch_place_detail(
    xid: Optional[str],
    api_key: Optional[str],
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 8.0,
) -> PlaceDetail:
    """Richer description for one place.

    Any failure (no id, no key, HTTP error, odd payload) yields an empty
    detail so the caller can still show the place.
    """
    if not xid or not api_key:
        return PlaceDetail(external_id=xid)
    data, error = await http_get_json(
        f"{BASE}/xid/{quote(xid, safe='')}",
        params={"apikey": api_key},
        timeout=timeout,
        session=session,
    )
    if error is not None or not isinstance(data, dict):
        logger.debug("OpenTripMap detail for %s unavailable: %s", xid, error)
        return PlaceDetail(external_id=xid)
    try:
        return parse_place_detail(xid, data)
    except AttributeError:
        logger.debug("OpenTripMap detail for %s has an unexpected shape", xid)
        return PlaceDetail(external_id=xid)
