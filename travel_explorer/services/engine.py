"""
Content aggregation engine: the single entry point used by the API layer.

The engine owns the process-wide guide section cache and climate cache and
hands its shared HTTP session to every provider call. All operations return
plain records; absence of data is `None` or an empty list, never an error.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Awaitable, List, Optional, TypeVar, Union

import aiohttp

from travel_explorer.config import Config, get_config
from travel_explorer.models import (
    ClimateMonth,
    DestinationBundle,
    GeocodeResult,
    GuideView,
    Photo,
    Place,
    PlaceDetail,
    Summary,
    WeatherDigest,
)
from travel_explorer.providers import (
    forecast_provider,
    geocoding,
    opentripmap_provider,
    summary_provider,
    unsplash_provider,
    wikivoyage_provider,
)
from travel_explorer.providers.base import ProviderNotAvailableError
from travel_explorer.services import guide_index
from travel_explorer.services.climate import ClimateCache
from travel_explorer.services.section_cache import GuideSectionCache
from travel_explorer.services.weather import build_digest
from travel_explorer.utils.html_sanitizer import sanitize_section_html

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RADIUS_M = 3000


class ContentEngine:
    """Resolves places, summaries, guides, climate and weather for a destination."""

    def __init__(self, session: aiohttp.ClientSession, config: Optional[Config] = None):
        if session is None:
            raise ProviderNotAvailableError("ContentEngine needs an HTTP session", provider_name="engine")
        self._session = session
        self.config = config or get_config()
        guide_cfg = self.config.guide_config
        self.section_cache = GuideSectionCache(
            fetch_section=self._fetch_section,
            sanitize=partial(
                sanitize_section_html,
                home=guide_cfg.home,
                max_images=guide_cfg.max_images,
                max_list_items=guide_cfg.max_list_items,
            ),
            cache_failures=guide_cfg.cache_failures,
            unavailable_text=guide_cfg.unavailable_text,
        )
        self.climate_cache = ClimateCache(fetch_samples=self._fetch_forecast_samples)

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session.closed:
            raise ProviderNotAvailableError("HTTP session is closed", provider_name="engine")
        return self._session

    def _timeout(self, operation: str) -> float:
        return self.config.get_timeout(operation)

    # --- places -----------------------------------------------------------

    async def resolve_places(self, lat: float, lon: float, radius: float = DEFAULT_RADIUS_M) -> List[Place]:
        return await opentripmap_provider.discover_places(
            lat, lon, radius,
            api_key=self.config.api_keys.opentripmap,
            session=self.session,
            timeout=self._timeout("places"),
        )

    async def describe_place(self, place: Union[Place, str, None]) -> PlaceDetail:
        """Lazy detail lookup for one place (or its external id); failures give an empty detail."""
        external_id = place.external_id if isinstance(place, Place) else place
        return await opentripmap_provider.fetch_place_detail(
            external_id,
            api_key=self.config.api_keys.opentripmap,
            session=self.session,
            timeout=self._timeout("detail"),
        )

    # --- summary ----------------------------------------------------------

    async def resolve_summary(self, title: str) -> Optional[Summary]:
        return await summary_provider.fetch_destination_summary(
            title,
            session=self.session,
            home=self.config.guide_config.home,
            guide_timeout=self._timeout("guide"),
            encyclopedia_timeout=self._timeout("encyclopedia"),
        )

    # --- guide ------------------------------------------------------------

    async def _fetch_section(self, title: str, section_id: int) -> Optional[str]:
        return await wikivoyage_provider.fetch_section_html(
            title, section_id,
            session=self.session,
            timeout=self._timeout("guide"),
            home=self.config.guide_config.home,
        )

    async def resolve_guide(self, title: str) -> GuideView:
        """Resolve the guide's section refs, prefetch them all, expose the first.

        `initial_html` is only set once every section of the batch has been
        fetched; the rest are then served from the cache without latency.
        """
        title = (title or "").strip()
        if not title:
            return GuideView(title=title)
        refs = await guide_index.fetch_section_refs(
            title,
            session=self.session,
            wanted=self.config.guide_config.wanted_sections,
            timeout=self._timeout("guide"),
            home=self.config.guide_config.home,
        )
        if not refs:
            return GuideView(title=title)
        sections = await self.section_cache.prefetch(title, refs)
        first = sections.get(refs[0].section_id) or self.section_cache.unavailable_text
        return GuideView(title=title, refs=refs, sections=sections, initial_html=first)

    async def get_guide_section(self, title: str, section_id: int) -> str:
        return await self.section_cache.get(title, section_id)

    # --- climate / weather ------------------------------------------------

    async def _fetch_forecast_samples(self, lat: float, lon: float):
        return await forecast_provider.fetch_forecast_samples(
            lat, lon,
            api_key=self.config.api_keys.openweathermap,
            session=self.session,
            timeout=self._timeout("forecast"),
        )

    async def resolve_climate(self, title: str, lat: float, lon: float) -> Optional[List[ClimateMonth]]:
        """Forecast-derived monthly outlook (an approximation, not climatology)."""
        return await self.climate_cache.get(title, lat, lon)

    async def resolve_weather(self, lat: float, lon: float) -> Optional[WeatherDigest]:
        current, samples = await asyncio.gather(
            forecast_provider.fetch_current_weather(
                lat, lon,
                api_key=self.config.api_keys.openweathermap,
                session=self.session,
                timeout=self._timeout("forecast"),
            ),
            self._fetch_forecast_samples(lat, lon),
        )
        return build_digest(current, samples)

    # --- geocoding / photos -----------------------------------------------

    async def geocode(self, name: str) -> Optional[GeocodeResult]:
        return await geocoding.geocode_place(name, session=self.session, timeout=self._timeout("geocode"))

    async def resolve_photos(self, query: str, limit: int = 12) -> List[Photo]:
        photos = await unsplash_provider.fetch_unsplash_photos(
            query,
            access_key=self.config.api_keys.unsplash,
            session=self.session,
            timeout=self._timeout("photos"),
        )
        return unsplash_provider.dedupe_by_author(photos, limit=limit)

    # --- aggregate --------------------------------------------------------

    async def _degrade(self, label: str, aw: Awaitable[T], default: Any) -> T:
        try:
            return await aw
        except (asyncio.CancelledError, ProviderNotAvailableError):
            raise
        except Exception:
            logger.exception("%s failed; continuing without it", label)
            return default

    async def explore(self, name: str, radius: float = DEFAULT_RADIUS_M) -> DestinationBundle:
        """Gather everything available for a destination name.

        Photos and geocoding run first (together); the remaining sub-features
        then run concurrently. Each one degrades independently.
        """
        name = (name or "").strip()
        photos, geo = await asyncio.gather(
            self._degrade("photos", self.resolve_photos(name), []),
            self._degrade("geocode", self.geocode(name), None),
        )

        async def _nothing(value):
            return value

        summary, guide, places, climate, weather = await asyncio.gather(
            self._degrade("summary", self.resolve_summary(name), None),
            self._degrade("guide", self.resolve_guide(name), GuideView(title=name)),
            self._degrade("places", self.resolve_places(geo.lat, geo.lon, radius), []) if geo else _nothing([]),
            self._degrade("climate", self.resolve_climate(name, geo.lat, geo.lon), None) if geo else _nothing(None),
            self._degrade("weather", self.resolve_weather(geo.lat, geo.lon), None) if geo else _nothing(None),
        )
        return DestinationBundle(
            name=name,
            geo=geo,
            photos=photos,
            summary=summary,
            guide=guide,
            places=places,
            climate=climate,
            weather=weather,
        )
