"""
Destination summary with a two-tier fallback: Wikivoyage intro first,
Wikipedia REST summary second. The tiers run one after the other; the second
is only queried when the first yields no text.
"""

import logging
from typing import Optional

import aiohttp

from travel_explorer.models import Summary
from travel_explorer.providers import wikipedia_provider, wikivoyage_provider
from travel_explorer.providers.tiered import resolve_tiered

logger = logging.getLogger(__name__)


async def fetch_destination_summary(
    title: str,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
    home: str = wikivoyage_provider.DEFAULT_HOME,
    guide_timeout: Optional[float] = None,
    encyclopedia_timeout: Optional[float] = None,
) -> Optional[Summary]:
    """Return the first available summary for `title`, or None.

    Each tier may carry its own timeout; `timeout` covers any tier without one.
    """
    if not title or not title.strip():
        return None
    title = title.strip()
    candidates = [
        wikivoyage_provider.summary_candidate(title, home=home, timeout=guide_timeout),
        wikipedia_provider.summary_candidate(title, timeout=encyclopedia_timeout),
    ]
    found = await resolve_tiered(candidates, session=session, timeout=timeout)
    if not found:
        logger.info("No summary available for %r", title)
        return None
    return found[0]
