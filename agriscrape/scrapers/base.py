"""Base scraper protocol and abstractions for listing-site extraction.

Defines the unified interface that all site scrapers must implement so the
crawl orchestrator can paginate and enrich any supported marketplace the
same way, plus the selector helpers the site scrapers share.
"""

import logging
from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup, Tag

from ..models import DetailData, ListingPage

logger = logging.getLogger(__name__)


def select_text(node: BeautifulSoup | Tag, css: str) -> str:
    """Get trimmed text of all elements matching ``css``.

    Matches are concatenated like a jQuery-style ``.text()`` call.
    Returns an empty string when nothing matches.
    """
    return "".join(el.get_text() for el in node.select(css)).strip()


def select_first_text(node: BeautifulSoup | Tag, css: str) -> str:
    """Get trimmed text of the first element matching ``css``."""
    el = node.select_one(css)
    return el.get_text().strip() if el else ""


def select_last_text(node: BeautifulSoup | Tag, css: str) -> str:
    """Get trimmed text of the last element matching ``css``."""
    matches = node.select(css)
    return matches[-1].get_text().strip() if matches else ""


def select_attr(node: BeautifulSoup | Tag, css: str, attr: str) -> str:
    """Get an attribute of the first element matching ``css``."""
    el = node.select_one(css)
    if el is None:
        return ""
    value = el.get(attr)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def parse_label_value_rows(
    node: BeautifulSoup | Tag,
    row_css: str,
    cell_css: str,
    strip_colon: bool = False,
) -> dict[str, str]:
    """Collect "label: value" rows into a mapping.

    The first matching cell of a row is the key and the last is the value,
    both trimmed. Rows with an empty key or value are skipped.

    Args:
        node: Document or element to search.
        row_css: Selector for rows.
        cell_css: Selector for cells within a row.
        strip_colon: Remove a trailing ':' from keys.

    Returns:
        Label to value mapping in document order.
    """
    rows: dict[str, str] = {}
    for row in node.select(row_css):
        cells = row.select(cell_css)
        if not cells:
            continue
        key = cells[0].get_text().strip()
        value = cells[-1].get_text().strip()
        if strip_colon:
            key = key.removesuffix(":").strip()
        if not key or not value:
            continue
        rows[key] = value
    return rows


def with_query_param(url: str, name: str, value: int | str) -> str:
    """Set a query parameter on a URL, replacing any existing value."""
    parsed = urlparse(url)
    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != name]
    query.append((name, str(value)))
    return urlunparse(parsed._replace(query=urlencode(query)))


def make_soup(html: str) -> BeautifulSoup:
    """Parse HTML with the lxml backend."""
    return BeautifulSoup(html, "lxml")


class ScraperProtocol(Protocol):
    """Protocol defining the interface for all site scrapers.

    Methods:
        get_site_name: Get site identifier.
        supports_url: Check if scraper can handle given URL.
        page_url: Build the URL of a given index page.
        parse_listing_page: Extract listing summaries from an index page.
        parse_detail_page: Extract extended fields from a detail page.
    """

    def get_site_name(self) -> str:
        """Get the site name identifier.

        Returns:
            Site name (e.g., 'agriaffaires', 'landwirt').
        """
        ...

    def supports_url(self, url: str) -> bool:
        """Check if this scraper can handle the given URL.

        Args:
            url: URL to check.

        Returns:
            True if scraper supports this URL, False otherwise.
        """
        ...

    def page_url(self, start_url: str, page: int) -> str:
        """Build the URL for a 1-based index page number.

        Args:
            start_url: Index URL without pagination parameters.
            page: Page number starting at 1.

        Returns:
            URL with the site's pagination parameter applied.
        """
        ...

    def parse_listing_page(self, html: str) -> ListingPage:
        """Extract listing summaries from an index page.

        Args:
            html: Index page body.

        Returns:
            Parsed page with summaries and the "next page" flag.
        """
        ...

    def parse_detail_page(self, html: str) -> DetailData:
        """Extract extended data from a detail page.

        Args:
            html: Detail page body.

        Returns:
            Detail fields and dynamic attributes.
        """
        ...


class BaseScraper:
    """Base class providing common functionality for all scrapers.

    Provides shared utilities and default implementations that can be
    inherited by concrete scraper implementations.
    """

    def __init__(self, site_name: str, origin: str):
        """Initialize base scraper.

        Args:
            site_name: Name of the site (e.g., 'agriaffaires').
            origin: Scheme and host used to absolutize relative links.
        """
        self.site_name = site_name
        self.origin = origin.rstrip("/")
        self.logger = logging.getLogger(f"{__name__}.{site_name}")

    def get_site_name(self) -> str:
        """Get the site name identifier."""
        return self.site_name

    def supports_url(self, url: str) -> bool:
        """Check if URL is on this scraper's host.

        Args:
            url: URL to check.

        Returns:
            True if the host matches the scraper origin, with or without www.
        """
        try:
            host = urlparse(url).netloc.lower().split(":")[0]
        except ValueError:
            return False
        own_host = urlparse(self.origin).netloc.lower()
        return host.removeprefix("www.") == own_host.removeprefix("www.")

    def absolutize_url(self, href: str) -> str:
        """Turn a relative link into an absolute one on the scraper origin.

        Args:
            href: Link as found in the markup.

        Returns:
            Absolute URL, or empty string for an empty link.
        """
        if not href:
            return ""
        if href.startswith("http"):
            return href
        return urljoin(self.origin + "/", href)

    def _log_page_parsed(self, kind: str, count: int) -> None:
        """Log the outcome of parsing a page.

        Args:
            kind: Type of page (index, detail).
            count: Number of items or attributes extracted.
        """
        self.logger.debug(f"Parsed {kind} page on {self.site_name}: {count} entries")


class ScraperRegistry:
    """Registry for managing site scrapers.

    Provides centralized management of all available scrapers with
    automatic URL routing.
    """

    def __init__(self) -> None:
        """Initialize empty scraper registry."""
        self._scrapers: dict[str, ScraperProtocol] = {}
        self.logger = logging.getLogger(f"{__name__}.registry")

    def register(self, scraper: ScraperProtocol) -> None:
        """Register a new scraper.

        Args:
            scraper: Scraper instance implementing ScraperProtocol.
        """
        site = scraper.get_site_name()
        self._scrapers[site] = scraper
        self.logger.debug(f"Registered scraper for site: {site}")

    def get_scraper_for_url(self, url: str) -> ScraperProtocol | None:
        """Find appropriate scraper for given URL.

        Args:
            url: URL to find scraper for.

        Returns:
            Scraper instance if found, None otherwise.
        """
        for scraper in self._scrapers.values():
            if scraper.supports_url(url):
                return scraper

        self.logger.warning(f"No scraper found for URL: {url}")
        return None

    def get_all_sites(self) -> list[str]:
        """Get list of all registered site names."""
        return list(self._scrapers.keys())


# Global scraper registry instance
scraper_registry = ScraperRegistry()
