"""Cancelable async feed fetch.

Uses ``aiohttp`` so a caller can bound the fetch with a deadline and
cancel it like any other asyncio task.  Cancellation propagates as
``asyncio.CancelledError``; every other failure surfaces as
``FeedFetchFailed`` or ``EmptyFeedResult`` exactly like the sync client.

Usage from synchronous code::

    from wpconflicts.async_downloaders import fetch_with_deadline
    vulns = fetch_with_deadline(SCANNER_FEED, deadline=60)
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from . import __version__
from .downloaders import PRODUCTION_FEED, decode_feed
from .errors import EmptyFeedResult, FeedFetchFailed
from .feed import Vulnerability, VulnerabilityFilter

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=300, connect=15)


def _headers() -> dict[str, str]:
    return {
        "User-Agent": f"wpconflicts/{__version__}",
        "Accept": "application/json",
    }


async def _fetch_json(session: aiohttp.ClientSession, url: str) -> Any:
    """Fetch and decode JSON, mapping transport failures to ``FeedFetchFailed``."""
    try:
        async with session.get(url) as resp:
            if resp.status < 200 or resp.status >= 300:
                raise FeedFetchFailed(f"HTTP GET request failed with {resp.status}", url=url, status=resp.status)
            body = await resp.read()
    except asyncio.TimeoutError as e:
        raise FeedFetchFailed("deadline exceeded", url=url) from e
    except aiohttp.ClientError as e:
        raise FeedFetchFailed(str(e), url=url) from e

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FeedFetchFailed(f"response body is not valid JSON: {e}", url=url) from e


async def fetch_vulnerabilities(
    session: aiohttp.ClientSession,
    url: str = PRODUCTION_FEED,
    vuln_filter: VulnerabilityFilter | None = None,
) -> list[Vulnerability]:
    """Fetch, validate and filter a feed on an existing session.

    Args:
        session: aiohttp session; its timeout acts as the deadline.
        url: Feed URL.
        vuln_filter: Optional exclusion predicates.

    Returns:
        Records left after exclusions, never empty.

    Raises:
        FeedFetchFailed: On network, status, deadline or decoding failure.
        EmptyFeedResult: If no record survives the exclusions.
        asyncio.CancelledError: If the calling task is cancelled.
    """
    logger.info("Fetching vulnerabilities from %s", url)
    vulns = decode_feed(await _fetch_json(session, url), url)
    if vuln_filter is not None:
        vulns = vuln_filter.apply(vulns)
    if not vulns:
        raise EmptyFeedResult(url)
    return vulns


async def _fetch_with_deadline(
    url: str,
    vuln_filter: VulnerabilityFilter | None,
    timeout: aiohttp.ClientTimeout,
) -> list[Vulnerability]:
    async with aiohttp.ClientSession(timeout=timeout, headers=_headers()) as session:
        return await fetch_vulnerabilities(session, url, vuln_filter)


def fetch_with_deadline(
    url: str = PRODUCTION_FEED,
    vuln_filter: VulnerabilityFilter | None = None,
    deadline: float | None = None,
) -> list[Vulnerability]:
    """Synchronous wrapper running the async fetch under ``asyncio.run``.

    Args:
        url: Feed URL.
        vuln_filter: Optional exclusion predicates.
        deadline: Total seconds allowed, ``None`` for the default timeout.

    Returns:
        Records left after exclusions.
    """
    timeout = DEFAULT_TIMEOUT if deadline is None else aiohttp.ClientTimeout(total=deadline)
    return asyncio.run(_fetch_with_deadline(url, vuln_filter, timeout))
