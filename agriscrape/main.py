"""Application entry point.

Parses the command line, configures logging and runs one crawl per selected
target. Targets are named entries from ``config/targets.yml`` or ad-hoc start
URLs on a supported site. A failure while writing results is fatal; every
other failure has already been logged and skipped by the crawler.
"""

import argparse
import asyncio
import logging
import re
from datetime import datetime
from pathlib import PurePosixPath
from urllib.parse import urlparse

from .config import config
from .core.container import Container
from .crawler.orchestrator import CrawlOrchestrator
from .models import CrawlReport, CrawlTarget
from .scrapers import scraper_registry
from .services.exporter import ExportError

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="agriscrape",
        description="Crawl used agricultural machinery listings into CSV files.",
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help="Target names from targets.yml or start URLs (default: all configured targets)",
    )
    parser.add_argument("--no-details", action="store_true", help="Skip detail pages")
    parser.add_argument("--max-pages", type=positive_int, help="Max index pages per target")
    parser.add_argument("--results-dir", help="Directory for CSV output")
    return parser.parse_args(argv)


def url_target(url: str) -> CrawlTarget | None:
    """Build an ad-hoc target for a start URL on a supported site.

    The output prefix combines the site name with the last path segment, e.g.
    ``landwirt_used_Deutz_tractors`` for ``.../used-Deutz-tractors.html``.
    """
    scraper = scraper_registry.get_scraper_for_url(url)
    if scraper is None:
        logger.error(f"Unsupported site: {url} (supported: {', '.join(scraper_registry.get_all_sites())})")
        return None

    stem = PurePosixPath(urlparse(url).path).stem
    slug = re.sub(r"[^A-Za-z0-9]+", "_", stem).strip("_")
    prefix = f"{scraper.get_site_name()}_{slug}" if slug else scraper.get_site_name()
    return CrawlTarget(name=url, start_url=url, output_prefix=prefix)


def unique_prefixes(targets: list[CrawlTarget]) -> list[CrawlTarget]:
    """Suffix repeated output prefixes so targets of one run never share a file."""
    seen: dict[str, int] = {}
    result = []
    for target in targets:
        count = seen.get(target.output_prefix, 0) + 1
        seen[target.output_prefix] = count
        if count > 1:
            target = target.model_copy(update={"output_prefix": f"{target.output_prefix}_{count}"})
        result.append(target)
    return result


def resolve_targets(names: list[str], no_details: bool = False, max_pages: int | None = None) -> list[CrawlTarget]:
    """Turn command-line target arguments into crawl targets.

    Args:
        names: Target names or start URLs; empty selects every configured target.
        no_details: Disable detail-page enrichment for all targets.
        max_pages: Page cap overriding the configured ones.

    Returns:
        Targets to crawl with distinct output prefixes; unknown names and
        unsupported URLs are logged and dropped.
    """
    targets: list[CrawlTarget] = []
    for name in names or [t.name for t in config.targets]:
        target = config.get_target(name)
        if target is None and name.startswith("http"):
            target = url_target(name)
        elif target is None:
            logger.error(f"Unknown target: {name}")
        if target is not None:
            targets.append(target)

    updates: dict[str, object] = {}
    if no_details:
        updates["fetch_details"] = False
    if max_pages is not None:
        updates["max_pages"] = max_pages
    return unique_prefixes([t.model_copy(update=updates) for t in targets])


async def run(
    orchestrator: CrawlOrchestrator,
    targets: list[CrawlTarget],
    results_dir: str | None = None,
) -> list[CrawlReport]:
    """Crawl targets one after another.

    Raises:
        ExportError: If a results file cannot be written.
    """
    started_at = datetime.now()
    reports = []
    for target in targets:
        try:
            report = await orchestrator.run_target(target, started_at, results_dir)
        except ValueError as e:
            logger.error(f"Skipping {target.name}: {e}")
            continue
        logger.info(
            f"Results saved to {report.output_path} "
            f"({report.listings_found} listings, {report.details_failed} detail failures)"
        )
        reports.append(report)
    return reports


def main(argv: list[str] | None = None) -> int:
    """Main application entry point.

    Returns:
        Process exit status, 1 when results could not be written.
    """
    args = parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=getattr(logging, config.crawl.log_level.upper(), logging.INFO),
    )

    targets = resolve_targets(args.targets, args.no_details, args.max_pages)
    if not targets:
        logger.error("No crawl targets selected")
        return 2

    container = Container()
    container.crawl_config.override(config.crawl)
    orchestrator = container.orchestrator()

    try:
        asyncio.run(run(orchestrator, targets, args.results_dir))
    except ExportError as e:
        logger.critical(f"Failed to write results: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
