"""
In-memory cache of sanitized guide sections.

Key schema: ``(title, section_id)``, value: sanitized HTML. Entries are never
invalidated during a run. Fetches are coalesced per key, so concurrent
readers of a cold key trigger a single upstream request.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, Optional, Tuple

from travel_explorer.models import GuideSectionRef
from travel_explorer.utils.single_flight import SingleFlight

logger = logging.getLogger(__name__)

SectionKey = Tuple[str, int]
SectionFetcher = Callable[[str, int], Awaitable[Optional[str]]]
Sanitizer = Callable[[str, str], str]

UNAVAILABLE_TEXT = "Section unavailable."


class GuideSectionCache:
    """Memoized, single-flight access to sanitized guide sections.

    Args:
        fetch_section: ``(title, section_id) -> raw html or None``
        sanitize: ``(raw_html, title) -> safe html``
        cache_failures: store the unavailable text for failed fetches, so a
            later request in the same run does not retry
        unavailable_text: returned (and possibly stored) on failure
    """

    def __init__(
        self,
        fetch_section: SectionFetcher,
        sanitize: Sanitizer,
        cache_failures: bool = True,
        unavailable_text: str = UNAVAILABLE_TEXT,
    ):
        self._fetch_section = fetch_section
        self._sanitize = sanitize
        self.cache_failures = cache_failures
        self.unavailable_text = unavailable_text
        self._entries: Dict[SectionKey, str] = {}
        self._flight: SingleFlight[SectionKey, str] = SingleFlight()

    def __contains__(self, key: SectionKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, title: str, section_id: int) -> Optional[str]:
        return self._entries.get((title, section_id))

    async def get(self, title: str, section_id: int) -> str:
        key = (title, section_id)
        cached = self._entries.get(key)
        if cached is not None:
            return cached
        return await self._flight.do(key, lambda: self._load(key))

    async def _load(self, key: SectionKey) -> str:
        title, section_id = key
        raw = await self._fetch_section(title, section_id)
        if not raw:
            logger.info("Guide section %s of %r unavailable", section_id, title)
            if self.cache_failures:
                self._entries[key] = self.unavailable_text
            return self.unavailable_text
        html = self._sanitize(raw, title)
        self._entries[key] = html
        return html

    async def prefetch(self, title: str, refs: Iterable[GuideSectionRef]) -> Dict[int, str]:
        """Fetch every ref concurrently and return once the whole batch is done.

        The mapping is ordered like `refs`.
        """
        ids = [r.section_id for r in refs]
        bodies = await asyncio.gather(*(self.get(title, sid) for sid in ids))
        return dict(zip(ids, bodies))
