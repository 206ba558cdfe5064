"""HTTP client for the Wordfence vulnerability feeds.

All network I/O is isolated here; the rest of the package works with
validated in-memory records.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from . import __version__
from .errors import EmptyFeedResult, FeedFetchFailed
from .feed import Vulnerability, VulnerabilityFilter, parse_vulnerabilities

logger = logging.getLogger(__name__)

# Detailed records fully analyzed by the Wordfence team.
PRODUCTION_FEED = "https://www.wordfence.com/api/intelligence/v2/vulnerabilities/production"
# Minimal records, including vulnerabilities still being researched.
SCANNER_FEED = "https://www.wordfence.com/api/intelligence/v2/vulnerabilities/scanner"

FEEDS = {"production": PRODUCTION_FEED, "scanner": SCANNER_FEED}

DEFAULT_HTTP_TIMEOUT = (10, 120)  # (connect, read)


def requests_session() -> requests.Session:
    """Create a requests session with the tool's default headers."""
    s = requests.Session()
    s.headers.update(
        {
            "User-Agent": f"wpconflicts/{__version__}",
            "Accept": "application/json",
        }
    )
    return s


def get_json(session: requests.Session, url: str, timeout: Any = DEFAULT_HTTP_TIMEOUT) -> Any:
    """Fetch and decode JSON from a URL.

    Raises:
        FeedFetchFailed: On network error, non-2xx status or invalid JSON.
    """
    try:
        r = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise FeedFetchFailed(str(e), url=url) from e

    if not r.ok:
        raise FeedFetchFailed(f"HTTP GET request failed with {r.status_code} {r.reason}", url=url, status=r.status_code)

    try:
        return r.json()
    except ValueError as e:
        raise FeedFetchFailed(f"response body is not valid JSON: {e}", url=url, status=r.status_code) from e


def decode_feed(data: Any, url: str) -> list[Vulnerability]:
    """Validate a decoded feed body, wrapping failures as ``FeedFetchFailed``."""
    try:
        return parse_vulnerabilities(data)
    except (ValueError, ValidationError) as e:
        raise FeedFetchFailed(f"response body is not a vulnerability feed: {e}", url=url) from e


class FeedClient:
    """Fetches and filters one Wordfence feed.

    Example::

        client = FeedClient(SCANNER_FEED).exclude_cves("CVE-2022-3590")
        vulns = client.fetch()

    Attributes:
        url: Feed URL, the production feed by default.
        session: requests session used for the single GET.
        timeout: ``(connect, read)`` timeout in seconds.
        retries: Extra attempts after a failed fetch; ``0`` means one try.
        filter: Exclusion predicates applied after decoding.
    """

    def __init__(
        self,
        url: str | None = None,
        session: requests.Session | None = None,
        timeout: Any = DEFAULT_HTTP_TIMEOUT,
        retries: int = 0,
    ):
        self.url = url or PRODUCTION_FEED
        self.session = session or requests_session()
        self.timeout = timeout
        self.retries = max(0, retries)
        self.filter = VulnerabilityFilter()

    def exclude_ids(self, *ids: str) -> FeedClient:
        self.filter.exclude_ids(*ids)
        return self

    def exclude_cves(self, *cves: str) -> FeedClient:
        self.filter.exclude_cves(*cves)
        return self

    def _get(self) -> Any:
        if self.retries == 0:
            return get_json(self.session, self.url, self.timeout)

        for attempt in Retrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            retry=retry_if_exception_type(FeedFetchFailed),
            reraise=True,
        ):
            with attempt:
                return get_json(self.session, self.url, self.timeout)

    def fetch(self, vuln_filter: VulnerabilityFilter | None = None) -> list[Vulnerability]:
        """Download, validate and filter the feed.

        Args:
            vuln_filter: Extra exclusions for this call only, applied after
                the client's own ``filter``.

        Returns:
            Records left after exclusions, never empty.

        Raises:
            FeedFetchFailed: On network, status or decoding failure.
            EmptyFeedResult: If no record survives the exclusions.
        """
        logger.info("Fetching vulnerabilities from %s", self.url)
        vulns = decode_feed(self._get(), self.url)
        kept = self.filter.apply(vulns)
        if vuln_filter is not None:
            kept = vuln_filter.apply(kept)
        logger.info("Loaded %d vulnerabilities (%d excluded)", len(kept), len(vulns) - len(kept))

        if not kept:
            raise EmptyFeedResult(self.url)
        return kept
