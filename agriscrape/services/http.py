"""HTTP session factory and page fetching.

Builds the shared aiohttp session used for a crawl and performs the single
GET request behind every index and detail page. Transport failures, bad
status codes and timeouts are normalised into ``FetchError``.
"""

import asyncio
import logging
from secrets import choice

import aiohttp

from ..config import CrawlConfig

logger = logging.getLogger(__name__)

BASE_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


class FetchError(Exception):
    """Raised when a page cannot be retrieved."""

    def __init__(self, url: str, reason: Exception | str):
        self.url = url
        self.reason = reason
        super().__init__(f"error fetching {url}: {reason}")


def build_headers(crawl_config: CrawlConfig) -> dict[str, str]:
    """Build the default header set for a crawl session.

    Args:
        crawl_config: Crawler settings.

    Returns:
        Header mapping applied to every request of the session.
    """
    headers = dict(BASE_HEADERS)
    headers["User-Agent"] = crawl_config.user_agents[0]
    if crawl_config.uk_region:
        headers["Accept-Language"] = "en-GB,en;q=0.5"
    return headers


def create_session(crawl_config: CrawlConfig) -> aiohttp.ClientSession:
    """Create configured aiohttp session for crawling.

    Sets up the session with the request timeout, browser-like headers and,
    when configured, disabled certificate verification and a GB region cookie.

    Args:
        crawl_config: Crawler settings.

    Returns:
        aiohttp.ClientSession: Configured HTTP session for making requests.
    """
    connector = aiohttp.TCPConnector(limit=10, ssl=crawl_config.verify_ssl)
    timeout = aiohttp.ClientTimeout(total=crawl_config.timeout)
    cookies = {"country_code": "gb"} if crawl_config.uk_region else None

    if not crawl_config.verify_ssl:
        logger.warning("TLS certificate verification is disabled")

    return aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers=build_headers(crawl_config),
        cookies=cookies,
    )


async def fetch_html(
    session: aiohttp.ClientSession, url: str, user_agents: list[str] | None = None
) -> str:
    """Fetch a page and return its body as text.

    Args:
        session: HTTP session for making requests.
        url: Page URL.
        user_agents: Optional pool to pick a per-request User-Agent from.

    Returns:
        Decoded response body.

    Raises:
        FetchError: On connection errors, non-2xx status or timeout.
    """
    headers = {"User-Agent": choice(user_agents)} if user_agents else None
    try:
        async with session.get(url, headers=headers) as response:
            response.raise_for_status()
            return await response.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchError(url, e) from e
