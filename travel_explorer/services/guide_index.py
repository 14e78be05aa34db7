"""
Map the fixed topic vocabulary onto a guide's volatile section indices.
"""

import logging
from typing import Dict, List, Optional, Sequence

import aiohttp

from travel_explorer.config import DEFAULT_WANTED_SECTIONS
from travel_explorer.models import GuideSectionListing, GuideSectionRef
from travel_explorer.providers import wikivoyage_provider

logger = logging.getLogger(__name__)


def _key(label: str) -> str:
    return label.strip().lower()


def resolve_section_refs(
    sections: Sequence[GuideSectionListing],
    wanted: Sequence[str] = DEFAULT_WANTED_SECTIONS,
) -> List[GuideSectionRef]:
    """Refs for every wanted label present in `sections`, in vocabulary order.

    Matching is case-insensitive on trimmed labels. When a label repeats in
    the listing, its first occurrence wins. An empty result means the guide
    is unavailable.
    """
    by_label: Dict[str, int] = {}
    for s in sections:
        by_label.setdefault(_key(s.label), s.index)

    refs: List[GuideSectionRef] = []
    for label in wanted:
        index = by_label.get(_key(label))
        if index is not None:
            refs.append(GuideSectionRef(label=label, section_id=index))
    return refs


async def fetch_section_refs(
    title: str,
    session: Optional[aiohttp.ClientSession] = None,
    wanted: Sequence[str] = DEFAULT_WANTED_SECTIONS,
    timeout: float = 10.0,
    home: str = wikivoyage_provider.DEFAULT_HOME,
) -> List[GuideSectionRef]:
    outline = await wikivoyage_provider.fetch_outline(title, session=session, timeout=timeout, home=home)
    if outline is None:
        logger.info("Guide outline unavailable for %r", title)
        return []
    return resolve_section_refs(outline.sections, wanted)
