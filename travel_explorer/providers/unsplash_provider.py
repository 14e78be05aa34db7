"""
Unsplash photo search for destination imagery.
"""

import logging
from typing import Any, List, Optional

import aiohttp

from travel_explorer.models import Photo
from travel_explorer.providers.utils import http_get_json

logger = logging.getLogger(__name__)

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"


def parse_photos(payload: Any, query: str) -> List[Photo]:
    if not isinstance(payload, dict):
        return []
    out: List[Photo] = []
    for p in payload.get("results") or []:
        if not isinstance(p, dict):
            continue
        user = p.get("user")
        author = user.get("name") if isinstance(user, dict) else None
        try:
            urls = p["urls"]
            out.append(Photo(
                id=str(p["id"]),
                thumb_url=urls["small"],
                full_url=urls["regular"],
                alt=p.get("alt_description") or query,
                author=author or "Unknown",
            ))
        except (KeyError, TypeError):
            continue
    return out


def dedupe_by_author(photos: List[Photo], limit: int = 12) -> List[Photo]:
    """Keep the first photo of each author, up to `limit` photos."""
    seen = set()
    out: List[Photo] = []
    for p in photos:
        if p.author in seen:
            continue
        seen.add(p.author)
        out.append(p)
        if len(out) >= limit:
            break
    return out


async def fetch_unsplash_photos(
    query: str,
    access_key: Optional[str],
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
) -> List[Photo]:
    """Landscape photos for a destination; [] without a key or on failure."""
    if not access_key or not query:
        return []
    params = {"query": query, "per_page": "9", "orientation": "landscape"}
    headers = {"Authorization": f"Client-ID {access_key}"}
    data, error = await http_get_json(UNSPLASH_SEARCH_URL, params=params, headers=headers, timeout=timeout, session=session)
    if error is not None:
        logger.debug("Unsplash search for %r failed: %s", query, error)
        return []
    return parse_photos(data, query)
