"""
Wikivoyage (MediaWiki action API) access: intro summaries, page outlines and
single rendered sections.
"""

import logging
from functools import partial
from typing import Any, List, Optional
from urllib.parse import quote

import aiohttp

from travel_explorer.models import GuideOutline, GuideSectionListing, Summary, SummarySource
from travel_explorer.providers.tiered import CandidateQuery
from travel_explorer.providers.utils import http_get_json

logger = logging.getLogger(__name__)

DEFAULT_HOME = "https://en.wikivoyage.org"


def api_url(home: str = DEFAULT_HOME) -> str:
    return f"{home}/w/api.php"


def page_url(title: str, home: str = DEFAULT_HOME) -> str:
    return f"{home}/wiki/{quote(title.replace(' ', '_'), safe='')}"


def normalize_summary(payload: Any, title: str, home: str = DEFAULT_HOME) -> List[Summary]:
    """Pick the intro extract out of an `action=query` response."""
    pages = ((payload or {}).get("query") or {}).get("pages") or {}
    first = next(iter(pages.values()), None)
    if not isinstance(first, dict):
        return []
    extract = (first.get("extract") or "").strip()
    if not extract:
        return []
    url = first.get("fullurl") or page_url(title, home)
    return [Summary(text=extract, url=url, source=SummarySource.PRIMARY_GUIDE)]


def summary_candidate(title: str, home: str = DEFAULT_HOME, timeout: Optional[float] = None) -> CandidateQuery:
    return CandidateQuery(
        label="wikivoyage-summary",
        url=api_url(home),
        timeout=timeout,
        params={
            "format": "json",
            "action": "query",
            "prop": "extracts|info",
            "inprop": "url",
            "exintro": "1",
            "explaintext": "1",
            "titles": title,
        },
        normalize=partial(normalize_summary, title=title, home=home),
    )


def _parse_sections(raw_sections: Any) -> List[GuideSectionListing]:
    out: List[GuideSectionListing] = []
    for s in raw_sections or []:
        if not isinstance(s, dict):
            continue
        line = s.get("line")
        try:
            index = int(s.get("index"))
        except (TypeError, ValueError):
            # transcluded sections carry ids like "T-1"
            continue
        if isinstance(line, str) and line.strip():
            out.append(GuideSectionListing(label=line, index=index))
    return out


async def fetch_outline(
    title: str,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
    home: str = DEFAULT_HOME,
) -> Optional[GuideOutline]:
    """Full rendered page plus its section listing, or None on failure."""
    params = {
        "format": "json",
        "action": "parse",
        "page": title,
        "prop": "text|sections",
    }
    data, error = await http_get_json(api_url(home), params=params, timeout=timeout, session=session)
    if error is not None or not isinstance(data, dict):
        return None
    parsed = data.get("parse")
    if not isinstance(parsed, dict):
        # MediaWiki reports missing pages as 200 with an "error" object
        logger.debug("Wikivoyage outline for %r missing: %s", title, data.get("error"))
        return None
    text = parsed.get("text")
    html = (text.get("*") if isinstance(text, dict) else None) or ""
    return GuideOutline(title=title, html=html, sections=_parse_sections(parsed.get("sections")))


async def fetch_section_html(
    title: str,
    section_id: int,
    session: Optional[aiohttp.ClientSession] = None,
    timeout: float = 10.0,
    home: str = DEFAULT_HOME,
) -> Optional[str]:
    """Raw rendered markup of one numbered section, or None on failure."""
    params = {
        "format": "json",
        "action": "parse",
        "page": title,
        "section": str(section_id),
        "prop": "text",
    }
    data, error = await http_get_json(api_url(home), params=params, timeout=timeout, session=session)
    if error is not None or not isinstance(data, dict):
        return None
    parsed = data.get("parse")
    if not isinstance(parsed, dict):
        return None
    text = parsed.get("text")
    html = text.get("*") if isinstance(text, dict) else None
    return html or None
