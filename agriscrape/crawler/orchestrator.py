"""Crawl orchestration for paginated listing sites.

Drives a site scraper through its index pages until a page comes back empty,
optionally enriches every listing from its detail page with bounded
concurrency, and hands the accumulated records to the CSV exporter.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path

import aiohttp

from ..config import CrawlConfig
from ..models import CrawlReport, CrawlTarget, DetailData, Listing, ListingPage
from ..scrapers.base import ScraperProtocol, ScraperRegistry
from ..services.exporter import write_csv
from ..services.http import FetchError, create_session, fetch_html
from ..services.throttle import sleep_politely

logger = logging.getLogger(__name__)


class CrawlOrchestrator:
    """Orchestrates one crawl per target.

    Responsibilities:
    - Route a target's start URL to the matching site scraper
    - Walk index pages until the first empty page
    - Fetch detail pages with a concurrency cap and politeness delay
    - Merge detail results into listings after all fetches finish
    - Write the run's CSV file
    """

    def __init__(self, crawl_config: CrawlConfig, registry: ScraperRegistry) -> None:
        """Initialize crawl orchestrator.

        Args:
            crawl_config: Crawler settings.
            registry: Registry used to find a scraper for each target.
        """
        self.config = crawl_config
        self.registry = registry

    async def _pause(self) -> None:
        await sleep_politely(self.config.base_delay, self.config.jitter)

    async def _fetch_index_page(
        self, scraper: ScraperProtocol, url: str, session: aiohttp.ClientSession
    ) -> ListingPage | None:
        """Fetch and parse one index page, None on failure."""
        try:
            html = await fetch_html(session, url, self.config.user_agents)
            return scraper.parse_listing_page(html)
        except FetchError as e:
            logger.error(f"Error fetching page {url}: {e.reason}")
        except Exception as e:
            logger.error(f"Error parsing page {url}: {e}")
        return None

    async def crawl_index(
        self,
        scraper: ScraperProtocol,
        target: CrawlTarget,
        session: aiohttp.ClientSession,
    ) -> tuple[list[Listing], int]:
        """Collect listing summaries from consecutive index pages.

        The crawl stops on the first page that yields no listings. A page
        that cannot be fetched or parsed counts as empty. The "next page"
        control is only logged. An optional page cap also stops the crawl.

        Args:
            scraper: Site scraper for the target.
            target: Crawl target.
            session: HTTP session for requests.

        Returns:
            Listings in page order and the number of pages requested.
        """
        max_pages = target.max_pages or self.config.max_pages
        listings: list[Listing] = []
        page = 1

        while True:
            url = scraper.page_url(target.start_url, page)
            logger.info(f"Scraping page {page}: {url}")

            parsed = await self._fetch_index_page(scraper, url, session)
            if parsed is None or not parsed.listings:
                logger.info(f"No more listings found on page {page}. Stopping.")
                break

            listings.extend(parsed.listings)
            logger.info(
                f"Found {len(parsed.listings)} listings on page {page}, "
                f"{len(listings)} so far (next page link: {parsed.has_next})"
            )

            if max_pages and page >= max_pages:
                logger.info(f"Reached page limit of {max_pages}. Stopping.")
                break

            page += 1
            await self._pause()

        return listings, page

    async def _fetch_detail(
        self,
        scraper: ScraperProtocol,
        listing: Listing,
        session: aiohttp.ClientSession,
        semaphore: asyncio.Semaphore,
        position: str,
    ) -> DetailData | None:
        """Fetch and parse one detail page, None on failure."""
        if not listing.detail_url:
            logger.warning(f"Listing '{listing.title}' has no detail URL, skipping")
            return None

        async with semaphore:
            await self._pause()
            logger.info(f"Scraping detail page {position}: {listing.detail_url}")
            try:
                html = await fetch_html(session, listing.detail_url, self.config.user_agents)
                return scraper.parse_detail_page(html)
            except FetchError as e:
                logger.error(f"Error fetching detail page {listing.detail_url}: {e.reason}")
            except Exception as e:
                logger.error(f"Error parsing detail page {listing.detail_url}: {e}")
        return None

    async def enrich_details(
        self,
        scraper: ScraperProtocol,
        listings: list[Listing],
        session: aiohttp.ClientSession,
    ) -> tuple[int, int]:
        """Enrich listings in place from their detail pages.

        Every fetch returns its own ``DetailData``; nothing is written to a
        listing until all fetches are done. Results are then merged in
        listing order. Failed pages leave their listing untouched.

        Args:
            scraper: Site scraper for the listings.
            listings: Listings to enrich.
            session: HTTP session for requests.

        Returns:
            Counts of enriched and failed listings.
        """
        if not listings:
            return 0, 0

        semaphore = asyncio.Semaphore(self.config.detail_concurrency)
        total = len(listings)
        details = await asyncio.gather(
            *[
                self._fetch_detail(scraper, listing, session, semaphore, f"{i}/{total}")
                for i, listing in enumerate(listings, 1)
            ]
        )

        enriched = 0
        for listing, detail in zip(listings, details):
            if detail is not None:
                listing.merge_detail(detail)
                enriched += 1

        return enriched, total - enriched

    async def crawl(
        self,
        target: CrawlTarget,
        session: aiohttp.ClientSession,
    ) -> tuple[list[Listing], CrawlReport]:
        """Crawl a target without writing output.

        Args:
            target: Crawl target.
            session: HTTP session for requests.

        Returns:
            Collected listings and the run report.

        Raises:
            ValueError: If no scraper supports the target's start URL.
        """
        scraper = self.registry.get_scraper_for_url(target.start_url)
        if scraper is None:
            raise ValueError(f"No scraper found for {target.start_url}")

        report = CrawlReport(target=target.name)
        listings, report.pages_crawled = await self.crawl_index(scraper, target, session)
        report.listings_found = len(listings)
        logger.info(f"Total listings found for {target.name}: {len(listings)}")

        if target.fetch_details:
            report.details_enriched, report.details_failed = await self.enrich_details(
                scraper, listings, session
            )

        return listings, report

    async def run_target(
        self,
        target: CrawlTarget,
        started_at: datetime,
        results_dir: str | Path | None = None,
    ) -> CrawlReport:
        """Crawl a target and write its CSV file.

        Args:
            target: Crawl target.
            started_at: Run start time for the output filename.
            results_dir: Output directory, defaults to the configured one.

        Returns:
            Report including the written file path.

        Raises:
            ValueError: If no scraper supports the target's start URL.
            ExportError: If the CSV file cannot be written.
        """
        async with create_session(self.config) as session:
            listings, report = await self.crawl(target, session)

        path = write_csv(
            listings,
            results_dir or self.config.results_dir,
            target.output_prefix,
            started_at,
        )
        report.output_path = str(path)
        return report
