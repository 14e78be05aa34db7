"""
Tiered fallback fetching.

A run walks an ordered list of candidate queries, one request at a time, and
stops at the first candidate whose normalized result is acceptable. Order
encodes preference: the most specific (or cheapest) query goes first and the
broadest fallback last.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

import aiohttp

from travel_explorer.providers.utils import http_get_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateQuery:
    """One concrete upstream request plus the normalizer for its response."""
    label: str
    url: str
    normalize: Callable[[Any], List[Any]]
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    # overrides the resolver-wide timeout for this request
    timeout: Optional[float] = None


def non_empty(result: List[Any]) -> bool:
    return bool(result)


async def resolve_tiered(
    candidates: Sequence[CandidateQuery],
    session: Optional[aiohttp.ClientSession] = None,
    accept: Callable[[List[Any]], bool] = non_empty,
    timeout: float = 10.0,
) -> List[Any]:
    """Return the first acceptable normalized result, or [] when none is.

    Args:
        candidates: Queries in preference order
        session: Shared aiohttp session
        accept: Success predicate over the normalized list (default: non-empty)
        timeout: Per-request timeout in seconds, unless a candidate sets its own

    Candidate k+1 is never started before candidate k's outcome is known.
    Transport failures, non-2xx responses and payloads the normalizer cannot
    read all count as an empty result for that candidate.
    """
    for position, candidate in enumerate(candidates, start=1):
        data, error = await http_get_json(
            candidate.url,
            params=candidate.params or None,
            headers=candidate.headers or None,
            timeout=candidate.timeout or timeout,
            session=session,
        )
        if error is not None:
            logger.debug("candidate %d/%d (%s) failed: %s", position, len(candidates), candidate.label, error)
            continue
        try:
            result = candidate.normalize(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("candidate %s returned an unreadable payload: %s", candidate.label, e)
            continue
        if accept(result):
            logger.debug("candidate %s accepted with %d item(s)", candidate.label, len(result))
            return result
    return []
