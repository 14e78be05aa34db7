"""
Wikipedia REST summaries, the second tier of the destination summary.
"""

import re
from typing import Any, List, Optional
from urllib.parse import quote

from travel_explorer.models import Summary, SummarySource
from travel_explorer.providers.tiered import CandidateQuery

WIKI_API_URL = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"


def looks_like_disambiguation(data: dict) -> bool:
    """Check if a REST summary describes a disambiguation page."""
    if data.get("type") == "disambiguation":
        return True
    low = (data.get("extract") or "").lower()[:200]
    return "may refer to" in low


def normalize_summary(payload: Any) -> List[Summary]:
    """Encyclopedia summary; needs both an extract and a desktop page URL."""
    if not isinstance(payload, dict) or looks_like_disambiguation(payload):
        return []
    extract = (payload.get("extract") or "").strip()
    url = ((payload.get("content_urls") or {}).get("desktop") or {}).get("page")
    if not extract or not url:
        return []
    return [Summary(text=extract, url=url, source=SummarySource.ENCYCLOPEDIA)]


def summary_candidate(title: str, lang: str = "en", timeout: Optional[float] = None) -> CandidateQuery:
    slug = re.sub(r"\s+", "_", title.strip())
    return CandidateQuery(
        label="wikipedia-summary",
        url=WIKI_API_URL.format(lang=lang, title=quote(slug, safe="")),
        normalize=normalize_summary,
        timeout=timeout,
    )
