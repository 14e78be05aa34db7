"""
Shared utilities for provider modules.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional, Tuple, Dict, Any

import aiohttp

logger = logging.getLogger(__name__)


@asynccontextmanager
async def get_session(session: Optional[aiohttp.ClientSession] = None):
    """Context manager for aiohttp session handling.

    If session is provided, yields it.
    If not, creates a new session and closes it after use.
    """
    if session is not None:
        yield session
    else:
        async with aiohttp.ClientSession() as new_session:
            yield new_session


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


async def http_get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10.0,
    session: Optional[aiohttp.ClientSession] = None,
) -> Tuple[Optional[Any], Optional[str]]:
    """
    GET a JSON document, never raising for transport-level problems.

    Args:
        url: The URL to request
        params: Query parameters
        headers: Request headers
        timeout: Total request timeout in seconds
        session: Optional aiohttp session to reuse

    Returns:
        Tuple of (response_data, error_message)
        - response_data: Parsed JSON response or None on any failure
        - error_message: Error string or None if successful

    Timeouts, connection errors, non-2xx statuses and undecodable bodies all
    come back as `(None, reason)`. Cancellation is not swallowed.
    """
    try:
        async with get_session(session) as sess:
            async with sess.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    logger.debug("GET %s -> HTTP %s", url, resp.status)
                    return None, f"HTTP {resp.status}"
                return await resp.json(), None
    except asyncio.TimeoutError:
        logger.warning("GET %s timed out after %.1fs", url, timeout)
        return None, "timeout"
    except aiohttp.ClientError as e:
        logger.warning("GET %s failed: %s", url, e)
        return None, str(e)
    except ValueError as e:
        logger.warning("GET %s returned an undecodable body: %s", url, e)
        return None, str(e)
